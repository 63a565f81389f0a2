"""
Stripe Webhook Handlers

Contains handlers for different Stripe webhook event types:
- CheckoutHandler: Checkout session events
- SubscriptionHandler: Subscription lifecycle events
"""

from .checkout import CheckoutHandler
from .subscription import SubscriptionHandler

__all__ = [
    'CheckoutHandler',
    'SubscriptionHandler',
]
