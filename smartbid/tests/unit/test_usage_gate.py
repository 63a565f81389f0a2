"""Unit tests for the usage record and the entitlement gate.

Tests cover:
- Gate truth table around the trial limit
- Remaining free checks
- Usage record parsing and serialization
"""

import pytest

from smartbid.src.billing.domain.usage_record import UsageRecord
from smartbid.src.billing.shared.config import CounterKey, FREE_TRIAL_LIMIT
from smartbid.src.billing.usage.gate import is_blocked, remaining_trial_checks


class TestIsBlocked:
    """Blocked iff bidderChecks >= limit and the user is not subscribed."""

    @pytest.mark.parametrize('bidder_checks', [0, 1, 2, 3, 10])
    @pytest.mark.parametrize('subscribed', [False, True])
    def test_truth_table(self, bidder_checks, subscribed):
        usage = UsageRecord(bidder_checks=bidder_checks, is_subscribed=subscribed)

        expected = bidder_checks >= 3 and not subscribed
        assert is_blocked(usage, limit=3) is expected

    def test_default_limit_is_three(self):
        assert FREE_TRIAL_LIMIT == 3
        assert is_blocked(UsageRecord(bidder_checks=2)) is False
        assert is_blocked(UsageRecord(bidder_checks=3)) is True

    def test_initiator_checks_never_block(self):
        usage = UsageRecord(initiator_checks=50, bidder_checks=0)
        assert is_blocked(usage, limit=3) is False

    def test_empty_record_is_allowed(self):
        assert is_blocked(UsageRecord.empty(), limit=3) is False


class TestRemainingTrialChecks:

    def test_counts_down_to_zero(self):
        assert remaining_trial_checks(UsageRecord(bidder_checks=0), 3) == 3
        assert remaining_trial_checks(UsageRecord(bidder_checks=2), 3) == 1
        assert remaining_trial_checks(UsageRecord(bidder_checks=7), 3) == 0

    def test_subscribed_is_unlimited(self):
        assert remaining_trial_checks(UsageRecord(bidder_checks=7, is_subscribed=True), 3) is None


class TestUsageRecord:

    def test_from_missing_document(self):
        assert UsageRecord.from_dict(None) == UsageRecord.empty()
        assert UsageRecord.from_dict({}) == UsageRecord.empty()

    def test_from_partial_document(self):
        usage = UsageRecord.from_dict({'bidderChecks': 2})

        assert usage.bidder_checks == 2
        assert usage.initiator_checks == 0
        assert usage.is_subscribed is False
        assert usage.billing_customer_id is None

    def test_bad_counter_values_read_as_zero(self):
        usage = UsageRecord.from_dict({'bidderChecks': 'lots', 'initiatorChecks': -4})

        assert usage.bidder_checks == 0
        assert usage.initiator_checks == 0

    def test_legacy_customer_field(self):
        usage = UsageRecord.from_dict({'isSubscribed': True, 'stripeCustomerId': 'cus_legacy'})
        assert usage.billing_customer_id == 'cus_legacy'

    def test_to_dict_uses_document_field_names(self):
        usage = UsageRecord(initiator_checks=1, bidder_checks=2, is_subscribed=True, billing_customer_id='cus_1')

        assert usage.to_dict() == {
            'initiatorChecks': 1,
            'bidderChecks': 2,
            'isSubscribed': True,
            'billingCustomerId': 'cus_1',
        }

    def test_to_dict_omits_unset_customer(self):
        assert 'billingCustomerId' not in UsageRecord().to_dict()

    def test_incremented_only_touches_one_counter(self):
        usage = UsageRecord(initiator_checks=4, bidder_checks=1)

        bumped = usage.incremented(CounterKey.BIDDER)

        assert bumped.bidder_checks == 2
        assert bumped.initiator_checks == 4
        assert usage.bidder_checks == 1

    def test_negative_counters_rejected(self):
        with pytest.raises(ValueError):
            UsageRecord(bidder_checks=-1)
