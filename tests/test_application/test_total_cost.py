"""Tests for total cost aggregation over a month window (in-memory store)."""
import uuid
import pytest
from dataclasses import dataclass
from datetime import date

from app.application.total_cost import (
    CalculateTotalCostUseCase, SubscriptionCandidate, SubscriptionCandidateStore,
    InvalidPeriodError, StoreUnavailableError,
    build_window, active_months_in_window,
)
from app.domain.month import month_ordinal, month_range, ordinal_of_date

ALICE = uuid.UUID("60601fee-2bf1-4721-ae6f-7636e79a0cba")
BOB = uuid.UUID("2f1b8c9e-7d43-4a1e-9c55-0e8f6b2a1d34")


@dataclass
class _Row:
    service_name: str
    cost_rub: int
    user_id: uuid.UUID
    start_date: date
    end_date: date | None = None


class InMemoryStore(SubscriptionCandidateStore):
    """Fake store: applies filters like the SQL store and records calls."""

    def __init__(self, rows):
        self.rows = list(rows)
        self.calls = []

    def list_active_candidates(self, owner_id, service_name):
        self.calls.append((owner_id, service_name))
        return [
            SubscriptionCandidate(r.start_date, r.end_date, r.cost_rub)
            for r in self.rows
            if (owner_id is None or r.user_id == owner_id)
            and (service_name is None or r.service_name == service_name)
        ]


class FailingStore(SubscriptionCandidateStore):
    def list_active_candidates(self, owner_id, service_name):
        raise StoreUnavailableError("db is down")


def _total(store, start, end, owner=None, service=None):
    (sy, sm), (ey, em) = start, end
    return CalculateTotalCostUseCase(store).execute(
        owner_id=owner, service_name=service,
        start_month=sm, start_year=sy, end_month=em, end_year=ey,
    )


def _brute_force(rows, start, end):
    """Explicit per-month loop over the window."""
    total = 0
    for m in month_range(month_ordinal(*start), month_ordinal(*end)):
        for r in rows:
            if ordinal_of_date(r.start_date) <= m and (r.end_date is None or m <= ordinal_of_date(r.end_date)):
                total += r.cost_rub
    return total


@pytest.fixture
def example_store():
    # A: 2024-01..2024-03, 100; B: 2024-02.., 50
    return InMemoryStore([
        _Row("A", 100, ALICE, date(2024, 1, 1), date(2024, 3, 1)),
        _Row("B", 50, BOB, date(2024, 2, 1)),
    ])


# ======================================================================
# 1. Reference example
# ======================================================================

class TestReferenceExample:
    def test_jan_feb(self, example_store):
        assert _total(example_store, (2024, 1), (2024, 2)) == 250

    def test_march_only(self, example_store):
        assert _total(example_store, (2024, 3), (2024, 3)) == 150

    def test_april_only(self, example_store):
        assert _total(example_store, (2024, 4), (2024, 4)) == 50


# ======================================================================
# 2. Month counting
# ======================================================================

class TestMonthCounting:
    def test_billed_per_month_not_per_subscription(self):
        store = InMemoryStore([_Row("Netflix", 990, ALICE, date(2025, 1, 1), date(2025, 12, 1))])
        assert _total(store, (2025, 3), (2025, 5)) == 3 * 990

    def test_single_month_window_counts_once(self):
        store = InMemoryStore([
            _Row("Netflix", 990, ALICE, date(2025, 1, 1), date(2025, 12, 1)),
            _Row("Spotify", 299, BOB, date(2025, 5, 1), date(2025, 5, 1)),
        ])
        assert _total(store, (2025, 5), (2025, 5)) == 990 + 299

    def test_open_ended_active_far_after_start(self):
        store = InMemoryStore([_Row("Yandex Plus", 400, ALICE, date(2020, 1, 1))])
        assert _total(store, (2030, 1), (2030, 12)) == 12 * 400

    def test_starts_after_window_contributes_zero(self):
        store = InMemoryStore([_Row("Yandex Plus", 400, ALICE, date(2025, 8, 1))])
        assert _total(store, (2025, 1), (2025, 7)) == 0

    def test_ends_before_window_contributes_zero(self):
        store = InMemoryStore([_Row("Netflix", 990, ALICE, date(2024, 1, 1), date(2024, 12, 1))])
        assert _total(store, (2025, 1), (2025, 12)) == 0

    def test_window_boundaries_inclusive(self):
        store = InMemoryStore([_Row("Netflix", 100, ALICE, date(2025, 3, 1), date(2025, 6, 1))])
        assert _total(store, (2025, 6), (2025, 9)) == 100
        assert _total(store, (2024, 12), (2025, 3)) == 100

    def test_window_across_year_boundary(self):
        store = InMemoryStore([_Row("Netflix", 100, ALICE, date(2024, 11, 1))])
        assert _total(store, (2024, 12), (2025, 2)) == 300

    def test_empty_store_returns_zero(self):
        assert _total(InMemoryStore([]), (2025, 1), (2025, 12)) == 0

    def test_widest_window(self):
        store = InMemoryStore([
            _Row("Netflix", 990, ALICE, date(1, 1, 1)),
            _Row("Spotify", 299, BOB, date(9999, 12, 1), date(9999, 12, 1)),
        ])
        assert _total(store, (1, 1), (9999, 12)) == 9999 * 12 * 990 + 299

    def test_matches_per_month_loop(self):
        rows = [
            _Row("A", 100, ALICE, date(2023, 5, 1), date(2024, 2, 1)),
            _Row("B", 50, BOB, date(2024, 2, 1)),
            _Row("C", 7, ALICE, date(2024, 7, 1), date(2024, 7, 1)),
            _Row("D", 13, BOB, date(2026, 1, 1)),
        ]
        store = InMemoryStore(rows)
        for start, end in [((2023, 1), (2026, 12)), ((2024, 2), (2024, 2)), ((2024, 6), (2025, 1))]:
            assert _total(store, start, end) == _brute_force(rows, start, end)


# ======================================================================
# 3. Filters
# ======================================================================

class TestFilters:
    @pytest.fixture
    def store(self):
        return InMemoryStore([
            _Row("Netflix", 990, ALICE, date(2025, 1, 1)),
            _Row("Spotify", 299, ALICE, date(2025, 1, 1)),
            _Row("Netflix", 990, BOB, date(2025, 1, 1)),
        ])

    def test_owner_filter(self, store):
        assert _total(store, (2025, 1), (2025, 1), owner=ALICE) == 990 + 299

    def test_service_filter(self, store):
        assert _total(store, (2025, 1), (2025, 1), service="Netflix") == 2 * 990

    def test_both_filters(self, store):
        assert _total(store, (2025, 1), (2025, 1), owner=BOB, service="Netflix") == 990

    def test_no_match_is_zero(self, store):
        assert _total(store, (2025, 1), (2025, 1), owner=BOB, service="Spotify") == 0

    def test_empty_service_filter_matches_everything(self, store):
        assert _total(store, (2025, 1), (2025, 1), service="") == 990 + 299 + 990
        assert store.calls[-1] == (None, None)

    def test_blank_service_filter_matches_everything(self, store):
        assert _total(store, (2025, 1), (2025, 1), service="   ") == 990 + 299 + 990
        assert store.calls[-1] == (None, None)

    def test_service_filter_is_stripped(self, store):
        assert _total(store, (2025, 1), (2025, 1), service=" Netflix ") == 2 * 990
        assert store.calls[-1] == (None, "Netflix")


# ======================================================================
# 4. Invalid period
# ======================================================================

class TestInvalidPeriod:
    @pytest.mark.parametrize("start,end", [
        ((2025, 0), (2025, 1)),
        ((2025, 1), (2025, 13)),
        ((2025, 2), (2025, 1)),
        ((2026, 1), (2025, 12)),
        ((-5, 1), (-5, 1)),
        ((0, 1), (2025, 1)),
        ((1, 1), (20000, 12)),
        ((10000, 1), (10000, 1)),
    ])
    def test_raises_before_touching_store(self, example_store, start, end):
        with pytest.raises(InvalidPeriodError):
            _total(example_store, start, end, owner=ALICE, service="A")
        assert example_store.calls == []

    def test_start_after_end_with_invalid_period_even_when_store_fails(self):
        with pytest.raises(InvalidPeriodError):
            _total(FailingStore(), (2025, 5), (2025, 4))


# ======================================================================
# 5. Store failure
# ======================================================================

class TestStoreFailure:
    def test_store_error_propagates(self):
        with pytest.raises(StoreUnavailableError):
            _total(FailingStore(), (2025, 1), (2025, 12))


# ======================================================================
# 6. Helpers
# ======================================================================

class TestHelpers:
    def test_build_window(self):
        w = build_window(11, 2024, 2, 2025)
        assert w.last - w.first + 1 == 4
        assert (w.first, w.last) == (month_ordinal(2024, 11), month_ordinal(2025, 2))

    def test_active_months_partial_overlap(self):
        w = build_window(1, 2025, 12, 2025)
        c = SubscriptionCandidate(date(2024, 10, 1), date(2025, 3, 1), 100)
        assert active_months_in_window(c, w) == 3

    def test_active_months_no_overlap(self):
        w = build_window(1, 2025, 12, 2025)
        c = SubscriptionCandidate(date(2026, 1, 1), None, 100)
        assert active_months_in_window(c, w) == 0
