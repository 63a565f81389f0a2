"""
Billing Module

Usage metering and Stripe subscription gating for SmartBid.

Submodules:
- shared: Configuration, exceptions
- domain: UsageRecord
- usage: Usage store, entitlement gate, metering service
- external: Stripe client, webhook verification and handlers
- subscriptions: Customer portal
- endpoints: API routes

Usage:
    from smartbid.src.billing import UsageService, InMemoryUsageStore, CounterKey

    usage_service = UsageService(InMemoryUsageStore(), limit=3)
    await usage_service.ensure_allowed(user_id, CounterKey.BIDDER)
"""

from .shared import (
    FREE_TRIAL_LIMIT,
    CounterKey,
    BillingError,
    BillingConfigurationError,
    BillingCustomerNotFoundError,
    WebhookError,
    UsageConflictError,
    TrialLimitReachedError,
)
from .domain import UsageRecord
from .usage import (
    is_blocked,
    UsageStore,
    InMemoryUsageStore,
    FirestoreUsageStore,
    UsageService,
)
from .external import StripeAPIWrapper, WebhookService
from .subscriptions import PortalHandler

__all__ = [
    'FREE_TRIAL_LIMIT',
    'CounterKey',
    'BillingError',
    'BillingConfigurationError',
    'BillingCustomerNotFoundError',
    'WebhookError',
    'UsageConflictError',
    'TrialLimitReachedError',
    'UsageRecord',
    'is_blocked',
    'UsageStore',
    'InMemoryUsageStore',
    'FirestoreUsageStore',
    'UsageService',
    'StripeAPIWrapper',
    'WebhookService',
    'PortalHandler',
]
