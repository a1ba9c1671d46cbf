from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, StrictInt

from pointbank.deps import get_point_service
from pointbank.models.point_history import PointHistory
from pointbank.models.user_point import MAX_POINT, MIN_USER_ID, UserPoint
from pointbank.services.points import PointService

router = APIRouter()


class PointAmountRequest(BaseModel):
    # Strict: JSON true/false or "5" are not amounts
    amount: StrictInt


@router.get("/{user_id}", response_model=UserPoint)
async def point(
    user_id: int = Path(..., ge=MIN_USER_ID, le=MAX_POINT),
    service: PointService = Depends(get_point_service),
):
    """Return the user's current balance (zero if never charged)."""
    return await service.get_balance(user_id)


@router.get("/{user_id}/histories", response_model=list[PointHistory])
async def histories(
    user_id: int = Path(..., ge=MIN_USER_ID, le=MAX_POINT),
    service: PointService = Depends(get_point_service),
):
    """Return every charge/use of the user, oldest first."""
    return await service.get_history(user_id)


@router.patch("/{user_id}/charge", response_model=UserPoint)
async def charge(
    body: PointAmountRequest,
    user_id: int = Path(..., ge=MIN_USER_ID, le=MAX_POINT),
    service: PointService = Depends(get_point_service),
):
    return await service.charge(user_id, body.amount)


@router.patch("/{user_id}/use", response_model=UserPoint)
async def use(
    body: PointAmountRequest,
    user_id: int = Path(..., ge=MIN_USER_ID, le=MAX_POINT),
    service: PointService = Depends(get_point_service),
):
    """Spend points. 400 INSUFFICIENT_BALANCE if the balance is too low."""
    return await service.use(user_id, body.amount)
