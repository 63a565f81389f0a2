"""Unit tests for InMemoryUsageStore and UsageService.

Tests cover:
- Concurrent increments are never lost
- Merge writes keep unrelated fields
- Billing customer reverse index
- ensure_allowed only gates the bidder counter
"""

import asyncio

import pytest

from smartbid.src.billing.shared.config import CounterKey
from smartbid.src.billing.shared.exceptions import TrialLimitReachedError
from smartbid.src.billing.usage import InMemoryUsageStore, UsageService


class TestInMemoryUsageStore:

    @pytest.mark.asyncio
    async def test_first_increment_creates_record(self):
        store = InMemoryUsageStore()
        assert await store.get('u1') is None

        usage = await store.increment('u1', CounterKey.BIDDER)

        assert usage.bidder_checks == 1
        assert usage.initiator_checks == 0
        assert (await store.get('u1')).bidder_checks == 1

    @pytest.mark.asyncio
    async def test_concurrent_increments_are_not_lost(self):
        """N concurrent increments from zero leave the counter at exactly N."""
        store = InMemoryUsageStore()

        await asyncio.gather(*(store.increment('u1', CounterKey.BIDDER) for _ in range(25)))

        assert (await store.get('u1')).bidder_checks == 25

    @pytest.mark.asyncio
    async def test_counters_are_independent(self):
        store = InMemoryUsageStore()

        await store.increment('u1', CounterKey.INITIATOR)
        await store.increment('u1', CounterKey.INITIATOR)
        usage = await store.increment('u1', CounterKey.BIDDER)

        assert usage.initiator_checks == 2
        assert usage.bidder_checks == 1

    @pytest.mark.asyncio
    async def test_increment_keeps_subscription_fields(self):
        store = InMemoryUsageStore()
        await store.link_billing_customer('u1', 'cus_1')

        usage = await store.increment('u1', CounterKey.BIDDER)

        assert usage.is_subscribed is True
        assert usage.billing_customer_id == 'cus_1'

    @pytest.mark.asyncio
    async def test_set_subscribed_creates_missing_record(self):
        store = InMemoryUsageStore()

        await store.set_subscribed('u1', True)

        usage = await store.get('u1')
        assert usage.is_subscribed is True
        assert usage.bidder_checks == 0

    @pytest.mark.asyncio
    async def test_set_subscribed_keeps_counters_and_customer(self):
        store = InMemoryUsageStore()
        await store.increment('u1', CounterKey.BIDDER)
        await store.link_billing_customer('u1', 'cus_1')

        await store.set_subscribed('u1', False)

        usage = await store.get('u1')
        assert usage.is_subscribed is False
        assert usage.bidder_checks == 1
        assert usage.billing_customer_id == 'cus_1'

    @pytest.mark.asyncio
    async def test_reverse_index(self):
        store = InMemoryUsageStore()
        await store.link_billing_customer('u1', 'cus_1')

        assert await store.find_user_by_billing_customer('cus_1') == 'u1'
        assert await store.find_user_by_billing_customer('cus_other') is None

    @pytest.mark.asyncio
    async def test_webhook_ledger_merges(self):
        store = InMemoryUsageStore()

        await store.put_webhook_event('evt_1', {'status': 'processing', 'eventType': 'x'})
        await store.put_webhook_event('evt_1', {'status': 'completed'})

        assert await store.get_webhook_event('evt_1') == {'status': 'completed', 'eventType': 'x'}


class TestUsageService:

    @pytest.fixture
    def store(self):
        return InMemoryUsageStore()

    @pytest.fixture
    def service(self, store):
        return UsageService(store, limit=3)

    @pytest.mark.asyncio
    async def test_allows_below_limit(self, service, store):
        for _ in range(2):
            await store.increment('u1', CounterKey.BIDDER)

        usage = await service.ensure_allowed('u1', CounterKey.BIDDER)

        assert usage.bidder_checks == 2

    @pytest.mark.asyncio
    async def test_blocks_at_limit(self, service, store):
        for _ in range(3):
            await store.increment('u1', CounterKey.BIDDER)

        with pytest.raises(TrialLimitReachedError) as exc_info:
            await service.ensure_allowed('u1', CounterKey.BIDDER)

        assert exc_info.value.status_code == 402
        assert await service.check('u1') is True

    @pytest.mark.asyncio
    async def test_initiator_counter_not_gated(self, service, store):
        for _ in range(3):
            await store.increment('u1', CounterKey.BIDDER)

        usage = await service.ensure_allowed('u1', CounterKey.INITIATOR)

        assert usage.bidder_checks == 3

    @pytest.mark.asyncio
    async def test_subscriber_never_blocked(self, service, store):
        for _ in range(10):
            await store.increment('u1', CounterKey.BIDDER)
        await store.set_subscribed('u1', True)

        await service.ensure_allowed('u1', CounterKey.BIDDER)
        assert await service.check('u1') is False

    @pytest.mark.asyncio
    async def test_summarize(self, service, store):
        usage = await store.increment('u1', CounterKey.BIDDER)

        summary = service.summarize(usage)

        assert summary == {
            'initiatorChecks': 0,
            'bidderChecks': 1,
            'isSubscribed': False,
            'limit': 3,
            'blocked': False,
            'remaining': 2,
        }
