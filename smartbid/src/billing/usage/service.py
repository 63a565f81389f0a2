"""
Usage Service

Couples the entitlement gate with the usage store for metered actions.
"""

import logging
from typing import Dict

from smartbid.src.billing.domain.usage_record import UsageRecord
from smartbid.src.billing.shared.config import CounterKey, GATED_COUNTER
from smartbid.src.billing.shared.exceptions import TrialLimitReachedError
from .gate import is_blocked, remaining_trial_checks
from .store import UsageStore

logger = logging.getLogger(__name__)


class UsageService:
    """
    Metering operations for one usage store and trial limit.

    Usage:
        usage_service = UsageService(store, limit=3)
        await usage_service.ensure_allowed(user_id, CounterKey.BIDDER)
        ...  # run the metered action
        await usage_service.increment_usage(user_id, CounterKey.BIDDER)
    """

    def __init__(self, store: UsageStore, limit: int):
        self.store = store
        self.limit = limit

    async def get_usage(self, user_id: str) -> UsageRecord:
        return await self.store.get_or_empty(user_id)

    async def check(self, user_id: str) -> bool:
        """True if the user's next bidder check would be blocked."""
        return is_blocked(await self.get_usage(user_id), self.limit)

    async def ensure_allowed(self, user_id: str, counter_key: CounterKey) -> UsageRecord:
        """
        Raise if the metered action must not run.

        Only the gated counter is checked against the trial limit; other
        counters are recorded but never block.

        Raises:
            TrialLimitReachedError: If the gate blocks the action
        """
        usage = await self.get_usage(user_id)
        if CounterKey(counter_key) == GATED_COUNTER and is_blocked(usage, self.limit):
            logger.info(f"[USAGE] Blocked {user_id}: {usage.bidder_checks}/{self.limit}, not subscribed")
            raise TrialLimitReachedError(user_id, usage.bidder_checks, self.limit)
        return usage

    async def increment_usage(self, user_id: str, counter_key: CounterKey) -> UsageRecord:
        """Atomically count one metered action. Propagates UsageConflictError."""
        return await self.store.increment(user_id, CounterKey(counter_key))

    def summarize(self, usage: UsageRecord) -> Dict:
        """Usage record plus gate state, for API responses."""
        return {
            **usage.to_dict(),
            'limit': self.limit,
            'blocked': is_blocked(usage, self.limit),
            'remaining': remaining_trial_checks(usage, self.limit),
        }
