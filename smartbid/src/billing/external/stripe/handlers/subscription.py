"""
Subscription Webhook Handler

Handles customer.subscription.deleted by clearing the subscription flag
of the user linked to the Stripe customer.
"""

import logging

from smartbid.src.billing.usage.store import UsageStore
from ..events import SubscriptionDeletedEvent

logger = logging.getLogger(__name__)


class SubscriptionHandler:
    """Handler for Stripe subscription lifecycle events."""

    def __init__(self, store: UsageStore):
        self.store = store

    async def handle_subscription_deleted(self, event: SubscriptionDeletedEvent) -> None:
        customer_id = event.customer_id
        if not customer_id:
            logger.warning(f"[SUBSCRIPTION] Deleted subscription {event.subscription.id} has no customer")
            return

        account_id = await self.store.find_user_by_billing_customer(customer_id)
        if not account_id:
            logger.warning(f"[SUBSCRIPTION] No account found for customer {customer_id}")
            return

        await self.store.set_subscribed(account_id, False)
        logger.info(f"[SUBSCRIPTION] Deleted: sub={event.subscription.id}, account={account_id} locked")
