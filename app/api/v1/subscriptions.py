"""
Subscriptions API endpoints (CRUD + total cost over a period)
"""
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_candidate_store, parse_uuid
from app.application.subscriptions import (
    CreateSubscriptionUseCase, GetSubscriptionUseCase, ListSubscriptionsUseCase,
    UpdateSubscriptionUseCase, DeleteSubscriptionUseCase,
    SubscriptionNotFoundError, SubscriptionValidationError,
)
from app.application.total_cost import (
    CalculateTotalCostUseCase, InvalidPeriodError, StoreUnavailableError,
    SubscriptionCandidateStore,
)
from app.domain.month import parse_month, format_month
from app.infrastructure.db.models import SubscriptionModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


# === Request/Response models ===

class SubscriptionRequest(BaseModel):
    """Тело запроса на создание и полную замену подписки"""
    service_name: str
    cost_rub: int
    user_id: uuid.UUID
    start_date: str  # "07-2025"
    end_date: str | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_month(cls, v: str | None) -> str | None:
        """Месяц в формате MM-YYYY (также принимаются YYYY-MM и ISO-даты)"""
        if v is None:
            return v
        return format_month(parse_month(v))


class SubscriptionResponse(BaseModel):
    id: uuid.UUID
    service_name: str
    cost_rub: int
    user_id: uuid.UUID
    start_date: str
    end_date: str | None = None


class TotalCostResponse(BaseModel):
    total_cost_rub: int


# === Helper functions ===

def _to_response(sub: SubscriptionModel) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=sub.id,
        service_name=sub.service_name,
        cost_rub=sub.cost_rub,
        user_id=sub.user_id,
        start_date=format_month(sub.start_date),
        end_date=format_month(sub.end_date) if sub.end_date else None,
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")


# === Endpoints ===

@router.post("", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
def create_subscription(req: SubscriptionRequest, db: Session = Depends(get_db)):
    """Создать подписку"""
    try:
        sub = CreateSubscriptionUseCase(db).execute(
            service_name=req.service_name,
            cost_rub=req.cost_rub,
            user_id=req.user_id,
            start_date=parse_month(req.start_date),
            end_date=parse_month(req.end_date) if req.end_date else None,
        )
    except SubscriptionValidationError as e:
        logger.warning("Invalid subscription input: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _to_response(sub)


@router.get("", response_model=list[SubscriptionResponse])
def list_subscriptions(
    user_id: str | None = Query(default=None),
    service_name: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    """Список подписок (опционально по владельцу и/или сервису)"""
    owner = parse_uuid(user_id, "user_id") if user_id else None
    subs = ListSubscriptionsUseCase(db).execute(user_id=owner, service_name=service_name)
    return [_to_response(s) for s in subs]


@router.get("/total-cost", response_model=TotalCostResponse)
def get_total_cost(
    start_month: int = Query(..., description="Start month (1-12)"),
    start_year: int = Query(..., description="Start year"),
    end_month: int = Query(..., description="End month (1-12)"),
    end_year: int = Query(..., description="End year"),
    user_id: str | None = Query(default=None),
    service_name: str | None = Query(default=None),
    store: SubscriptionCandidateStore = Depends(get_candidate_store),
):
    """Суммарная стоимость подписок за период (включительно по месяцам)"""
    owner = parse_uuid(user_id, "user_id") if user_id else None
    try:
        total = CalculateTotalCostUseCase(store).execute(
            owner_id=owner,
            service_name=service_name or None,
            start_month=start_month,
            start_year=start_year,
            end_month=end_month,
            end_year=end_year,
        )
    except InvalidPeriodError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreUnavailableError:
        logger.exception("Failed to calculate total cost")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="store unavailable")
    return TotalCostResponse(total_cost_rub=total)


@router.get("/{sub_id}", response_model=SubscriptionResponse)
def get_subscription(sub_id: str, db: Session = Depends(get_db)):
    """Подписка по id"""
    try:
        sub = GetSubscriptionUseCase(db).execute(parse_uuid(sub_id))
    except SubscriptionNotFoundError:
        raise _not_found()
    return _to_response(sub)


@router.put("/{sub_id}", response_model=SubscriptionResponse)
def update_subscription(sub_id: str, req: SubscriptionRequest, db: Session = Depends(get_db)):
    """Полностью заменить поля подписки (id берётся из URL, а не из тела)"""
    try:
        sub = UpdateSubscriptionUseCase(db).execute(
            sub_id=parse_uuid(sub_id),
            service_name=req.service_name,
            cost_rub=req.cost_rub,
            user_id=req.user_id,
            start_date=parse_month(req.start_date),
            end_date=parse_month(req.end_date) if req.end_date else None,
        )
    except SubscriptionNotFoundError:
        raise _not_found()
    except SubscriptionValidationError as e:
        logger.warning("Invalid subscription update for %s: %s", sub_id, e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _to_response(sub)


@router.delete("/{sub_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subscription(sub_id: str, db: Session = Depends(get_db)):
    """Удалить подписку"""
    try:
        DeleteSubscriptionUseCase(db).execute(parse_uuid(sub_id))
    except SubscriptionNotFoundError:
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
