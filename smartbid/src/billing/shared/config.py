"""
Billing Configuration

Usage-metering constants and document-store layout for the billing module.

Usage:
    from smartbid.src.billing.shared.config import CounterKey, usage_doc_path

    path = usage_doc_path('default-app-id', 'user-1')
    # 'artifacts/default-app-id/users/user-1/usage_limits/main_tracker'
"""

from enum import Enum


# =============================================================================
# TRIAL CONFIGURATION
# =============================================================================
FREE_TRIAL_LIMIT: int = 3


# =============================================================================
# COUNTERS
# =============================================================================
class CounterKey(str, Enum):
    """Metered counters held on a usage record (values are document fields)."""
    INITIATOR = "initiatorChecks"
    BIDDER = "bidderChecks"


# Counter that the entitlement gate compares against the trial limit
GATED_COUNTER: CounterKey = CounterKey.BIDDER


# =============================================================================
# DOCUMENT STORE LAYOUT
# =============================================================================
USAGE_COLLECTION: str = "usage_limits"
USAGE_DOC_ID: str = "main_tracker"
BILLING_CUSTOMERS_COLLECTION: str = "billing_customers"
WEBHOOK_EVENTS_COLLECTION: str = "webhook_events"


def app_root(app_id: str) -> str:
    return f"artifacts/{app_id}"


def usage_doc_path(app_id: str, user_id: str) -> str:
    """Path of the single usage document for a user."""
    return f"{app_root(app_id)}/users/{user_id}/{USAGE_COLLECTION}/{USAGE_DOC_ID}"


def billing_customer_doc_path(app_id: str, customer_id: str) -> str:
    """Path of the reverse index entry billing customer -> user."""
    return f"{app_root(app_id)}/{BILLING_CUSTOMERS_COLLECTION}/{customer_id}"


def webhook_event_doc_path(app_id: str, event_id: str) -> str:
    return f"{app_root(app_id)}/{WEBHOOK_EVENTS_COLLECTION}/{event_id}"
