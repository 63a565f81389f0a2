"""Shared billing configuration and exceptions."""

from .config import (
    FREE_TRIAL_LIMIT,
    GATED_COUNTER,
    CounterKey,
    usage_doc_path,
    billing_customer_doc_path,
    webhook_event_doc_path,
)
from .exceptions import (
    BillingError,
    BillingConfigurationError,
    BillingCustomerNotFoundError,
    WebhookError,
    UsageConflictError,
    TrialLimitReachedError,
)

__all__ = [
    'FREE_TRIAL_LIMIT',
    'GATED_COUNTER',
    'CounterKey',
    'usage_doc_path',
    'billing_customer_doc_path',
    'webhook_event_doc_path',
    'BillingError',
    'BillingConfigurationError',
    'BillingCustomerNotFoundError',
    'WebhookError',
    'UsageConflictError',
    'TrialLimitReachedError',
]
