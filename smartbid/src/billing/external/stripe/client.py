"""
Stripe API Client Wrapper

Provides a single entry point for outbound Stripe API calls.
Callers get typed billing errors instead of raw Stripe exceptions.
"""

import logging
from typing import Any, Callable

import stripe

from smartbid.src.billing.shared.exceptions import BillingConfigurationError

logger = logging.getLogger(__name__)


class StripeAPIWrapper:
    """
    Wrapper for Stripe API calls bound to one secret key.

    The key is passed per request instead of through the global
    `stripe.api_key`, so several wrappers (and tests) can coexist:
        stripe_api = StripeAPIWrapper(settings.STRIPE_SECRET_KEY)
        session = await stripe_api.create_billing_portal_session(customer="cus_...", return_url="...")
    """

    def __init__(self, api_key: str):
        self.api_key = api_key

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def ensure_configured(self):
        """Raise error if Stripe is not configured."""
        if not self.api_key:
            raise BillingConfigurationError("Server missing Stripe Key", setting="STRIPE_SECRET_KEY")

    async def safe_stripe_call(self, func: Callable, *args, **kwargs) -> Any:
        """
        Execute a Stripe API call with this wrapper's credentials.

        Args:
            func: Async Stripe API function
            *args: Positional arguments
            **kwargs: Keyword arguments

        Returns:
            Result from Stripe API
        """
        self.ensure_configured()
        return await func(*args, api_key=self.api_key, **kwargs)

    # -------------------------------------------------------------------------
    # Billing Portal
    # -------------------------------------------------------------------------

    async def create_billing_portal_session(self, **kwargs) -> 'stripe.billing_portal.Session':
        """
        Create a billing portal session for self-service.

        Args:
            customer: Stripe customer ID
            return_url: URL to return to after portal session

        Returns:
            Stripe Billing Portal Session object with url
        """
        return await self.safe_stripe_call(stripe.billing_portal.Session.create_async, **kwargs)
