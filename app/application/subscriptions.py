"""
Subscription use cases: CRUD подписок.

Модуль работает напрямую с ORM. Update заменяет все поля целиком
(без частичного patch), id берётся из URL и не меняется.
"""
import uuid
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from app.domain.subscription import (
    SubscriptionValidationError,
    normalize_service_name, validate_cost, normalize_period,
)
from app.infrastructure.db.models import SubscriptionModel


class SubscriptionNotFoundError(LookupError):
    pass


def _get_or_raise(db: Session, sub_id: uuid.UUID) -> SubscriptionModel:
    sub = db.get(SubscriptionModel, sub_id)
    if not sub:
        raise SubscriptionNotFoundError("Подписка не найдена")
    return sub


class CreateSubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        service_name: str,
        cost_rub: int,
        user_id: uuid.UUID,
        start_date: date,
        end_date: date | None = None,
    ) -> SubscriptionModel:
        name = normalize_service_name(service_name)
        cost = validate_cost(cost_rub)
        start, end = normalize_period(start_date, end_date)

        sub = SubscriptionModel(
            service_name=name,
            cost_rub=cost,
            user_id=user_id,
            start_date=start,
            end_date=end,
        )
        self.db.add(sub)
        self.db.flush()
        self.db.commit()
        self.db.refresh(sub)
        return sub


class GetSubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, sub_id: uuid.UUID) -> SubscriptionModel:
        return _get_or_raise(self.db, sub_id)


class ListSubscriptionsUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: uuid.UUID | None = None,
        service_name: str | None = None,
    ) -> List[SubscriptionModel]:
        q = self.db.query(SubscriptionModel)
        if user_id is not None:
            q = q.filter(SubscriptionModel.user_id == user_id)
        service_name = (service_name or "").strip()
        if service_name:
            q = q.filter(SubscriptionModel.service_name == service_name)
        return q.order_by(SubscriptionModel.start_date, SubscriptionModel.service_name).all()


class UpdateSubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        sub_id: uuid.UUID,
        service_name: str,
        cost_rub: int,
        user_id: uuid.UUID,
        start_date: date,
        end_date: date | None = None,
    ) -> SubscriptionModel:
        sub = _get_or_raise(self.db, sub_id)

        name = normalize_service_name(service_name)
        cost = validate_cost(cost_rub)
        start, end = normalize_period(start_date, end_date)

        sub.service_name = name
        sub.cost_rub = cost
        sub.user_id = user_id
        sub.start_date = start
        sub.end_date = end
        self.db.commit()
        self.db.refresh(sub)
        return sub


class DeleteSubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, sub_id: uuid.UUID) -> None:
        sub = _get_or_raise(self.db, sub_id)
        self.db.delete(sub)
        self.db.commit()
