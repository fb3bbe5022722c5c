"""
Subscription candidate store backed by PostgreSQL (SQLAlchemy)
"""
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.total_cost import (
    SubscriptionCandidate, SubscriptionCandidateStore, StoreUnavailableError,
)
from app.infrastructure.db.models import SubscriptionModel


class SqlSubscriptionCandidateStore(SubscriptionCandidateStore):
    """
    Reads subscriptions for total-cost aggregation in a single SELECT

    Owner and service filters are applied in SQL; only the columns the
    aggregation needs are fetched.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_active_candidates(
        self,
        owner_id: uuid.UUID | None,
        service_name: str | None,
    ) -> List[SubscriptionCandidate]:
        """
        Args:
            owner_id: фильтр по владельцу (None = все)
            service_name: фильтр по названию сервиса (None = все)

        Raises:
            StoreUnavailableError: если запрос к БД не удался
        """
        stmt = select(
            SubscriptionModel.start_date,
            SubscriptionModel.end_date,
            SubscriptionModel.cost_rub,
        )
        if owner_id is not None:
            stmt = stmt.where(SubscriptionModel.user_id == owner_id)
        if service_name is not None:
            stmt = stmt.where(SubscriptionModel.service_name == service_name)

        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as e:
            raise StoreUnavailableError("Subscription store is unavailable") from e

        return [
            SubscriptionCandidate(start_date=start, end_date=end, cost_rub=cost)
            for start, end, cost in rows
        ]
