"""
Usage Store

Narrow persistence interface for usage records, the billing-customer reverse
index and the webhook event ledger, plus an in-memory implementation.

The concurrency contract lives here: `increment` is an all-or-nothing
read-modify-write, so concurrent increments for one user never lose an update
and an absent record is created on first use.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from smartbid.src.billing.domain.usage_record import UsageRecord
from smartbid.src.billing.shared.config import CounterKey

logger = logging.getLogger(__name__)


class UsageStore(ABC):
    """Persistence for per-user usage records."""

    @abstractmethod
    async def get(self, user_id: str) -> Optional[UsageRecord]:
        """Return the stored record, or None if the user was never metered."""

    async def get_or_empty(self, user_id: str) -> UsageRecord:
        return await self.get(user_id) or UsageRecord.empty()

    @abstractmethod
    async def increment(self, user_id: str, counter_key: CounterKey) -> UsageRecord:
        """
        Atomically add one to a counter and return the committed record.

        Raises:
            UsageConflictError: If the transaction aborted; nothing was written
        """

    @abstractmethod
    async def set_subscribed(self, user_id: str, is_subscribed: bool) -> None:
        """Merge-write the subscription flag, creating the record if absent."""

    @abstractmethod
    async def link_billing_customer(self, user_id: str, customer_id: str) -> None:
        """
        Merge-write {isSubscribed: True, billingCustomerId} for the user and
        record customer_id -> user_id in the reverse index.
        """

    @abstractmethod
    async def find_user_by_billing_customer(self, customer_id: str) -> Optional[str]:
        """Reverse lookup through the billing-customer index."""

    @abstractmethod
    async def get_webhook_event(self, event_id: str) -> Optional[Dict]:
        """Return the ledger entry for a webhook event, if any."""

    @abstractmethod
    async def put_webhook_event(self, event_id: str, data: Dict) -> None:
        """Merge-write a ledger entry for a webhook event."""

    async def close(self) -> None:
        """Release backend resources."""


class InMemoryUsageStore(UsageStore):
    """
    Dict-backed usage store.

    An asyncio.Lock stands in for the document store's transactional
    isolation. Used by tests and by local runs without Firestore credentials.
    """

    def __init__(self):
        self._records: Dict[str, dict] = {}
        self._customers: Dict[str, str] = {}
        self._webhook_events: Dict[str, dict] = {}
        self._lock = asyncio.Lock()

    async def get(self, user_id: str) -> Optional[UsageRecord]:
        data = self._records.get(user_id)
        return UsageRecord.from_dict(data) if data is not None else None

    async def increment(self, user_id: str, counter_key: CounterKey) -> UsageRecord:
        counter_key = CounterKey(counter_key)
        async with self._lock:
            current = UsageRecord.from_dict(self._records.get(user_id))
            # Yield between read and write, as a network round trip would
            await asyncio.sleep(0)
            updated = current.incremented(counter_key)
            self._records[user_id] = {**self._records.get(user_id, {}), **updated.to_dict()}

        logger.debug(f"[USAGE] {user_id} {counter_key.value} -> {updated.get_counter(counter_key)}")
        return updated

    async def set_subscribed(self, user_id: str, is_subscribed: bool) -> None:
        async with self._lock:
            self._merge(user_id, {'isSubscribed': is_subscribed})

    async def link_billing_customer(self, user_id: str, customer_id: str) -> None:
        async with self._lock:
            self._merge(user_id, {'isSubscribed': True, 'billingCustomerId': customer_id})
            self._customers[customer_id] = user_id

    async def find_user_by_billing_customer(self, customer_id: str) -> Optional[str]:
        return self._customers.get(customer_id)

    async def get_webhook_event(self, event_id: str) -> Optional[Dict]:
        entry = self._webhook_events.get(event_id)
        return dict(entry) if entry is not None else None

    async def put_webhook_event(self, event_id: str, data: Dict) -> None:
        self._webhook_events[event_id] = {**self._webhook_events.get(event_id, {}), **data}

    def _merge(self, user_id: str, fields: dict) -> None:
        base = self._records.get(user_id) or UsageRecord.empty().to_dict()
        self._records[user_id] = {**base, **fields}
