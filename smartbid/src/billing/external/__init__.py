"""External payment provider integrations."""

from .stripe import StripeAPIWrapper, WebhookService

__all__ = [
    'StripeAPIWrapper',
    'WebhookService',
]
