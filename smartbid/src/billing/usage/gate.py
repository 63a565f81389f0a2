"""
Entitlement Gate

Pure decision over a usage snapshot: may the user run another metered action?
"""

from smartbid.src.billing.domain.usage_record import UsageRecord
from smartbid.src.billing.shared.config import FREE_TRIAL_LIMIT


def is_blocked(usage: UsageRecord, limit: int = FREE_TRIAL_LIMIT) -> bool:
    """Blocked iff the bidder trial is used up and the user is not subscribed."""
    return usage.bidder_checks >= limit and not usage.is_subscribed


def remaining_trial_checks(usage: UsageRecord, limit: int = FREE_TRIAL_LIMIT) -> int | None:
    """Free checks left, or None when the subscription makes usage unlimited."""
    if usage.is_subscribed:
        return None
    return max(0, limit - usage.bidder_checks)
