"""
Total cost of subscriptions over a window of calendar months.

Each subscription is billed cost_rub once for every calendar month it is
active in; a partial month counts in full. A subscription is active in
month m when start <= m and (end is None or m <= end).

The calculation is a pure read: one call to the candidate store, then
integer arithmetic on month ordinals (see app.domain.month).
"""
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from app.domain.month import month_ordinal, ordinal_of_date

logger = logging.getLogger(__name__)

# Years representable by datetime.date
MIN_YEAR = 1
MAX_YEAR = 9999


class InvalidPeriodError(ValueError):
    """Query window is malformed (month outside 1..12, year out of range or end before start)."""
    pass


class StoreUnavailableError(Exception):
    """The subscription store failed to answer."""
    pass


@dataclass(frozen=True)
class SubscriptionCandidate:
    """The part of a subscription the aggregation needs."""
    start_date: date
    end_date: date | None
    cost_rub: int


@dataclass(frozen=True)
class MonthWindow:
    """Inclusive window of month ordinals."""
    first: int
    last: int


class SubscriptionCandidateStore(ABC):
    """
    Read contract consumed by the aggregation.

    Implementations return exactly the subscriptions matching both filters:
    owner_id None matches every owner, service_name None matches every
    service. Failures must be raised as StoreUnavailableError.
    """

    @abstractmethod
    def list_active_candidates(
        self,
        owner_id: uuid.UUID | None,
        service_name: str | None,
    ) -> Sequence[SubscriptionCandidate]:
        ...


def build_window(start_month: int, start_year: int, end_month: int, end_year: int) -> MonthWindow:
    """
    Validate the query bounds and convert them to a MonthWindow.

    Raises:
        InvalidPeriodError: month outside 1..12, year outside MIN_YEAR..MAX_YEAR
            or (start_year, start_month) > (end_year, end_month)
    """
    if not 1 <= start_month <= 12 or not 1 <= end_month <= 12:
        raise InvalidPeriodError("month must be 1-12")
    if not MIN_YEAR <= start_year <= MAX_YEAR or not MIN_YEAR <= end_year <= MAX_YEAR:
        raise InvalidPeriodError(f"year must be {MIN_YEAR}-{MAX_YEAR}")
    first = month_ordinal(start_year, start_month)
    last = month_ordinal(end_year, end_month)
    if first > last:
        raise InvalidPeriodError("invalid period: start is after end")
    return MonthWindow(first=first, last=last)


def active_months_in_window(candidate: SubscriptionCandidate, window: MonthWindow) -> int:
    """
    Number of months of the window in which the candidate is billed.

    Months m with start <= m and (end is None or m <= end), counted as the
    size of the intersection of [start, end] with the window.
    """
    first = max(ordinal_of_date(candidate.start_date), window.first)
    last = window.last
    if candidate.end_date is not None:
        last = min(ordinal_of_date(candidate.end_date), last)
    return max(0, last - first + 1)


def sum_costs(candidates: Sequence[SubscriptionCandidate], window: MonthWindow) -> int:
    return sum(c.cost_rub * active_months_in_window(c, window) for c in candidates)


class CalculateTotalCostUseCase:
    """
    Total cost of all matching subscriptions for the window
    [start_month/start_year, end_month/end_year], both ends inclusive.
    """

    def __init__(self, store: SubscriptionCandidateStore):
        self.store = store

    def execute(
        self,
        owner_id: uuid.UUID | None,
        service_name: str | None,
        start_month: int,
        start_year: int,
        end_month: int,
        end_year: int,
    ) -> int:
        window = build_window(start_month, start_year, end_month, end_year)

        # Blank string is "no filter", same as None; stored names are stripped
        service_name = (service_name or "").strip() or None

        candidates = self.store.list_active_candidates(owner_id, service_name)
        total = sum_costs(candidates, window)

        logger.debug(
            "Total cost: owner=%s service=%s window=%d..%d candidates=%d total=%d",
            owner_id, service_name, window.first, window.last, len(candidates), total,
        )
        return total
