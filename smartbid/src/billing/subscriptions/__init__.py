"""
Subscriptions Module

Self-service subscription management. Subscription state itself is driven
by Stripe webhooks (see external.stripe).
"""

from .handlers import PortalHandler

__all__ = [
    'PortalHandler',
]
