"""
Subscription domain validation.

Rules:
  - service_name is non-empty after stripping whitespace
  - cost_rub is a positive integer (roubles per calendar month) that fits
    the 32-bit INTEGER column
  - end_date, if present, is not before start_date (month granularity)
"""
from datetime import date

from app.domain.month import ordinal_of_date, truncate_to_month

# Upper bound of the INTEGER column holding cost_rub
MAX_COST_RUB = 2_147_483_647


class SubscriptionValidationError(ValueError):
    pass


def normalize_service_name(service_name: str) -> str:
    name = (service_name or "").strip()
    if not name:
        raise SubscriptionValidationError("Название сервиса не может быть пустым")
    return name


def validate_cost(cost_rub: int) -> int:
    # bool is an int subclass
    if isinstance(cost_rub, bool) or not isinstance(cost_rub, int):
        raise SubscriptionValidationError("Стоимость должна быть целым числом")
    if cost_rub <= 0:
        raise SubscriptionValidationError("Стоимость должна быть больше нуля")
    if cost_rub > MAX_COST_RUB:
        raise SubscriptionValidationError(f"Стоимость не может превышать {MAX_COST_RUB}")
    return cost_rub


def normalize_period(start_date: date, end_date: date | None) -> tuple[date, date | None]:
    """
    Truncate both bounds to the first of the month and check their order.

    Raises SubscriptionValidationError if end is before start.
    """
    start = truncate_to_month(start_date)
    end = truncate_to_month(end_date) if end_date is not None else None
    if end is not None and ordinal_of_date(end) < ordinal_of_date(start):
        raise SubscriptionValidationError("Дата окончания не может быть раньше даты начала")
    return start, end
