"""
Stripe Integration Module

- StripeAPIWrapper: outbound API calls (billing portal)
- WebhookService: signature verification, deduplication and dispatch
- Event variants and handlers for checkout and subscription events

Usage:
    from smartbid.src.billing.external.stripe import StripeAPIWrapper, WebhookService

    stripe_api = StripeAPIWrapper(settings.STRIPE_SECRET_KEY)
    service = WebhookService(usage_store, settings.STRIPE_WEBHOOK_SECRET)
"""

from .client import StripeAPIWrapper
from .events import (
    CheckoutSessionCompletedEvent,
    SubscriptionDeletedEvent,
    UnhandledEvent,
    WebhookEvent,
    parse_event,
)
from .handlers import CheckoutHandler, SubscriptionHandler
from .webhook_lock import WebhookLock
from .webhooks import WebhookService

__all__ = [
    'StripeAPIWrapper',
    'CheckoutSessionCompletedEvent',
    'SubscriptionDeletedEvent',
    'UnhandledEvent',
    'WebhookEvent',
    'parse_event',
    'CheckoutHandler',
    'SubscriptionHandler',
    'WebhookLock',
    'WebhookService',
]
