"""
Stripe Webhook Service

Central dispatcher for Stripe webhook events.
Handles signature verification, deduplication, and routing to handlers.
"""

import json
import logging
from typing import Any, Dict, Optional

import stripe

from smartbid.src.billing.shared.exceptions import BillingConfigurationError, WebhookError
from smartbid.src.billing.usage.store import UsageStore
from .events import (
    CheckoutSessionCompletedEvent,
    SubscriptionDeletedEvent,
    WebhookEvent,
    parse_event,
)
from .handlers import CheckoutHandler, SubscriptionHandler
from .webhook_lock import WebhookLock

logger = logging.getLogger(__name__)


class WebhookService:
    """
    Central service for processing Stripe webhooks.

    Responsibilities:
    - Verify webhook signatures
    - Deduplicate events through the webhook ledger
    - Route events to appropriate handlers
    - Acknowledge every verified event, even when its handler fails

    Usage:
        webhook_service = WebhookService(store, settings.STRIPE_WEBHOOK_SECRET)
        result = await webhook_service.handle_webhook_event(raw_body, sig_header)
    """

    def __init__(self, store: Optional[UsageStore], webhook_secret: str, tolerance: int = 300):
        self.store = store
        self.webhook_secret = webhook_secret
        self.tolerance = tolerance
        self.lock = WebhookLock(store)
        self.checkout_handler = CheckoutHandler(store)
        self.subscription_handler = SubscriptionHandler(store)

    def verify_and_parse(self, payload: bytes, sig_header: Optional[str]) -> WebhookEvent:
        """
        Verify the Stripe-Signature header and parse the event.

        Raises:
            BillingConfigurationError: If the webhook secret is not configured
            WebhookError: If the signature or payload is invalid
        """
        if not sig_header:
            raise WebhookError("Missing stripe-signature header", code="MISSING_SIGNATURE")

        if not self.webhook_secret:
            logger.error("[WEBHOOK] STRIPE_WEBHOOK_SECRET not configured")
            raise BillingConfigurationError("Webhook secret not configured", setting="STRIPE_WEBHOOK_SECRET")

        try:
            body = payload.decode('utf-8') if isinstance(payload, (bytes, bytearray)) else payload
            stripe.WebhookSignature.verify_header(body, sig_header, self.webhook_secret, self.tolerance)
        except stripe.SignatureVerificationError as e:
            logger.warning(f"[WEBHOOK] Invalid signature: {e}")
            raise WebhookError("Invalid webhook signature", code="INVALID_SIGNATURE")
        except UnicodeDecodeError as e:
            logger.warning(f"[WEBHOOK] Invalid payload encoding: {e}")
            raise WebhookError("Invalid payload", code="INVALID_PAYLOAD")

        try:
            return parse_event(json.loads(body))
        except ValueError as e:
            logger.warning(f"[WEBHOOK] Invalid payload: {e}")
            raise WebhookError("Invalid payload", code="INVALID_PAYLOAD")

    async def handle_webhook_event(self, payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
        """
        Process an incoming Stripe webhook.

        Args:
            payload: Raw request body, exactly as received
            sig_header: Value of the stripe-signature header

        Returns:
            Dict with processing status

        Raises:
            WebhookError / BillingConfigurationError: Before any state change
        """
        event = self.verify_and_parse(payload, sig_header)
        if self.store is None:
            logger.error(f"[WEBHOOK] Verified event {event.id} received but no document store is configured")
            raise BillingConfigurationError("Document store not configured", setting="FIREBASE_SERVICE_ACCOUNT")

        can_process, reason = await self.lock.check_and_mark_webhook_processing(event.id, event.type)
        if not can_process:
            logger.info(f"[WEBHOOK] Skipping event {event.id}: {reason}")
            return {'status': 'success', 'event_id': event.id, 'message': reason}

        logger.info(f"[WEBHOOK] Processing event type: {event.type} (ID: {event.id})")

        try:
            await self._route_event(event)
        except Exception as e:
            # Acknowledge anyway so Stripe does not retry indefinitely
            logger.error(f"[WEBHOOK] Error processing webhook {event.id}: {e}", exc_info=True)
            await self.lock.mark_webhook_failed(event.id, f"{type(e).__name__}: {str(e)[:500]}")
            return {'status': 'success', 'event_id': event.id, 'error': 'processed_with_errors'}

        await self.lock.mark_webhook_completed(event.id)
        return {'status': 'success', 'event_id': event.id}

    async def _route_event(self, event: WebhookEvent) -> None:
        """Route event to the appropriate handler."""
        if isinstance(event, CheckoutSessionCompletedEvent):
            await self.checkout_handler.handle_checkout_completed(event)
        elif isinstance(event, SubscriptionDeletedEvent):
            await self.subscription_handler.handle_subscription_deleted(event)
        else:
            logger.info(f"[WEBHOOK] Unhandled event type: {event.type}")
