"""
Portal Handler

Issues Stripe Customer Portal sessions so subscribers can manage or
cancel their subscription themselves.
"""

import logging

import stripe

from smartbid.src.billing.external.stripe import StripeAPIWrapper
from smartbid.src.billing.shared.exceptions import (
    BillingError,
    BillingCustomerNotFoundError,
)
from smartbid.src.billing.usage.store import UsageStore

logger = logging.getLogger(__name__)


class PortalHandler:
    """
    Handles Stripe Customer Portal operations.

    The Customer Portal allows users to:
    - View and update payment methods
    - View invoice history
    - Cancel their subscription
    """

    def __init__(self, store: UsageStore, stripe_api: StripeAPIWrapper, return_url: str):
        self.store = store
        self.stripe_api = stripe_api
        self.return_url = return_url

    async def create_portal_session(self, user_id: str) -> str:
        """
        Create Stripe Customer Portal session.

        Args:
            user_id: User whose linked Stripe customer the portal is scoped to

        Returns:
            The portal URL, verbatim from Stripe

        Raises:
            BillingConfigurationError: If no Stripe secret key is configured
            BillingCustomerNotFoundError: If the user has no linked customer
            BillingError: If Stripe rejects the request
        """
        self.stripe_api.ensure_configured()

        usage = await self.store.get(user_id)
        customer_id = usage.billing_customer_id if usage else None
        if not customer_id:
            logger.info(f"[PORTAL] No billing customer for {user_id}")
            raise BillingCustomerNotFoundError(user_id)

        logger.info(f"[PORTAL] Creating portal session for {user_id}")

        try:
            session = await self.stripe_api.create_billing_portal_session(
                customer=customer_id,
                return_url=self.return_url,
            )
        except stripe.StripeError as e:
            logger.error(f"[PORTAL] Failed to create portal session: {e}")
            raise BillingError(
                code="PORTAL_SESSION_FAILED",
                message=f"Failed to create billing portal session: {e}",
                details={"user_id": user_id}
            ) from e

        logger.info(f"[PORTAL] Created session {session.id} for {user_id}")
        return session.url
