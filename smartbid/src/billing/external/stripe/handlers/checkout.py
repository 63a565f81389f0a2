"""
Checkout Session Webhook Handler

Handles checkout.session.completed: unlocks the paying user and links
their Stripe customer to the usage record.
"""

import logging

from smartbid.src.billing.usage.store import UsageStore
from ..events import CheckoutSessionCompletedEvent

logger = logging.getLogger(__name__)


class CheckoutHandler:
    """
    Handler for Stripe Checkout session webhook events.

    The user id arrives as the session's client_reference_id, set by the
    frontend when it opens the Stripe payment link.
    """

    def __init__(self, store: UsageStore):
        self.store = store

    async def handle_checkout_completed(self, event: CheckoutSessionCompletedEvent) -> None:
        """
        Merge {isSubscribed: True, billingCustomerId} into the user's record.

        Merge writes make redelivery of the same event a no-op.
        """
        user_id = event.user_id
        customer_id = event.customer_id

        logger.info(f"[CHECKOUT] Processing completed checkout: session_id={event.session.id}")

        if not user_id:
            logger.warning(f"[CHECKOUT] No client_reference_id on session {event.session.id}")
            return

        if customer_id:
            await self.store.link_billing_customer(user_id, customer_id)
            logger.info(f"[CHECKOUT] Unlocked & linked: {user_id} -> {customer_id}")
        else:
            await self.store.set_subscribed(user_id, True)
            logger.warning(f"[CHECKOUT] Unlocked {user_id} without a Stripe customer; portal unavailable")
