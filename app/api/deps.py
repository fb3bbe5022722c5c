"""
FastAPI dependencies (DB session, stores)
"""
import uuid

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.total_cost import SubscriptionCandidateStore
from app.infrastructure.db.session import get_db as _get_db
from app.infrastructure.subscriptions.repository import SqlSubscriptionCandidateStore


# Re-export get_db для удобства
get_db = _get_db


def get_candidate_store(db: Session = Depends(get_db)) -> SubscriptionCandidateStore:
    """Store used by total-cost aggregation (one per request session)"""
    return SqlSubscriptionCandidateStore(db)


def parse_uuid(value: str, field: str = "id") -> uuid.UUID:
    """
    Разобрать UUID из строки запроса

    Raises:
        HTTPException(400): если строка не является UUID
    """
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"invalid {field}",
        )
