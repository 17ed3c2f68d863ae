"""Application tests for the short order id sequence."""

from concurrent.futures import ThreadPoolExecutor

from protean import current_domain
from shipping.domain import shipping
from shipping.sequence.sequence import Sequence, next_short_order_id, next_value


class TestNextValue:
    def test_starts_at_one(self):
        assert next_value("invoice") == 1

    def test_increments_and_persists(self):
        next_value("invoice")
        next_value("invoice")
        assert current_domain.repository_for(Sequence).get("invoice").seq == 2

    def test_sequences_are_independent(self):
        next_value("invoice")
        assert next_value("order") == 1


class TestShortOrderId:
    def test_offset_by_one_thousand(self):
        assert next_short_order_id() == 1001
        assert next_short_order_id() == 1002

    def test_concurrent_callers_never_share_a_value(self):
        def allocate(_):
            with shipping.domain_context():
                return next_short_order_id()

        with ThreadPoolExecutor(max_workers=8) as pool:
            values = list(pool.map(allocate, range(40)))

        assert sorted(values) == list(range(1001, 1041))
