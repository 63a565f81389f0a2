"""
Usage Record Domain Entity

Per-user trial counters and subscription flag.
One record per user, stored at
artifacts/{app_id}/users/{user_id}/usage_limits/main_tracker.
"""

from dataclasses import dataclass, replace
from typing import Optional

from smartbid.src.billing.shared.config import CounterKey


@dataclass(frozen=True)
class UsageRecord:
    """
    A user's metered usage and entitlement state.

    Attributes:
        initiator_checks: Audits run from the RFQ-initiator side
        bidder_checks: Audits run from the bidder side (gated by the trial limit)
        is_subscribed: Whether the user has an active paid subscription
        billing_customer_id: Stripe customer ID, set once a checkout completes

    Counters only ever grow; there is no reset path.
    """
    initiator_checks: int = 0
    bidder_checks: int = 0
    is_subscribed: bool = False
    billing_customer_id: Optional[str] = None

    def __post_init__(self):
        if self.initiator_checks < 0 or self.bidder_checks < 0:
            raise ValueError("usage counters must be non-negative")

    def get_counter(self, counter_key: CounterKey) -> int:
        if counter_key == CounterKey.INITIATOR:
            return self.initiator_checks
        return self.bidder_checks

    def incremented(self, counter_key: CounterKey) -> 'UsageRecord':
        """Return a copy with one counter increased by one."""
        if counter_key == CounterKey.INITIATOR:
            return replace(self, initiator_checks=self.initiator_checks + 1)
        return replace(self, bidder_checks=self.bidder_checks + 1)

    @classmethod
    def empty(cls) -> 'UsageRecord':
        """The implicit record of a user that has never been metered."""
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'UsageRecord':
        """
        Create a UsageRecord from a stored document.

        Missing fields fall back to zero / unsubscribed. The legacy
        `stripeCustomerId` field is accepted for the billing customer.
        """
        if not data:
            return cls.empty()

        def parse_count(value) -> int:
            try:
                return max(0, int(value or 0))
            except (TypeError, ValueError):
                return 0

        return cls(
            initiator_checks=parse_count(data.get(CounterKey.INITIATOR.value)),
            bidder_checks=parse_count(data.get(CounterKey.BIDDER.value)),
            is_subscribed=bool(data.get('isSubscribed', False)),
            billing_customer_id=data.get('billingCustomerId') or data.get('stripeCustomerId') or None,
        )

    def to_dict(self) -> dict:
        """Convert to the stored document shape."""
        data = {
            CounterKey.INITIATOR.value: self.initiator_checks,
            CounterKey.BIDDER.value: self.bidder_checks,
            'isSubscribed': self.is_subscribed,
        }
        if self.billing_customer_id:
            data['billingCustomerId'] = self.billing_customer_id
        return data
