"""Point balance operations: charge, use, and history.

Every mutation for a user runs its read, compute, write and history append
under that user's lock, so concurrent requests for one user observe each
other in a single total order and the balance never drops below zero.
Different users never share a lock. A balance write whose history record
never lands is undone before the lock is released.
"""

import asyncio

from pointbank.core.exceptions import (
    AMOUNT_TOO_LARGE,
    BALANCE_TOO_LARGE,
    CHARGE_AMOUNT_POSITIVE,
    INSUFFICIENT_POINTS,
    USE_AMOUNT_POSITIVE,
    InsufficientBalanceError,
    InvalidAmountError,
)
from pointbank.core.locks import KeyedLock
from pointbank.core.logging import get_logger
from pointbank.models.point_history import PointHistory, TransactionType
from pointbank.models.user_point import MAX_POINT, UserPoint
from pointbank.storage.base import BalanceStore, HistoryLog

log = get_logger(__name__)


class PointService:
    def __init__(self, balances: BalanceStore, histories: HistoryLog, locks: KeyedLock | None = None):
        self.balances = balances
        self.histories = histories
        self.locks = locks or KeyedLock()

    async def get_balance(self, user_id: int) -> UserPoint:
        return await self.balances.get(user_id)

    async def get_history(self, user_id: int) -> list[PointHistory]:
        """Records for the user in the order their operations completed."""
        return await self.histories.list_by_user(user_id)

    async def charge(self, user_id: int, amount: int) -> UserPoint:
        """Add points.

        Raises InvalidAmountError if amount <= 0, if amount exceeds MAX_POINT,
        or if the resulting balance would.
        """
        _check_amount(amount, CHARGE_AMOUNT_POSITIVE)

        async with self.locks.hold(user_id):
            current = await self.balances.get(user_id)
            if current.point > MAX_POINT - amount:
                raise InvalidAmountError(
                    BALANCE_TOO_LARGE,
                    details={"user_id": user_id, "balance": current.point, "max_balance": MAX_POINT},
                )
            updated = await self._commit(current, current.point + amount, amount, TransactionType.CHARGE)

        log.info("points_charged", user_id=user_id, amount=amount, balance_after=updated.point)
        return updated

    async def use(self, user_id: int, amount: int) -> UserPoint:
        """Spend points.

        Raises InvalidAmountError if amount <= 0 or exceeds MAX_POINT, and
        InsufficientBalanceError if the balance at the time this call holds
        the user's lock is smaller than amount. Neither case writes anything.
        """
        _check_amount(amount, USE_AMOUNT_POSITIVE)

        async with self.locks.hold(user_id):
            current = await self.balances.get(user_id)
            if current.point < amount:
                log.info("points_use_rejected", user_id=user_id, amount=amount, balance=current.point)
                raise InsufficientBalanceError(
                    INSUFFICIENT_POINTS,
                    details={"user_id": user_id, "balance": current.point, "requested": amount},
                )
            updated = await self._commit(current, current.point - amount, -amount, TransactionType.USE)

        log.info("points_used", user_id=user_id, amount=amount, balance_after=updated.point)
        return updated

    async def _commit(self, current: UserPoint, point: int, delta: int, type: TransactionType) -> UserPoint:
        """Write the new balance and its history record, or neither. Caller holds the user's lock."""
        updated = await self.balances.set(current.id, point)
        try:
            await self.histories.append(current.id, delta, type, updated.update_millis)
        except BaseException:
            # No record landed (cancelled or failed): put the previous balance back before the lock is released.
            await asyncio.shield(self.balances.set(current.id, current.point))
            log.warning("points_write_rolled_back", user_id=current.id, delta=delta, balance=current.point)
            raise
        return updated


def _check_amount(amount: int, non_positive_message: str) -> None:
    if amount > MAX_POINT:
        raise InvalidAmountError(AMOUNT_TOO_LARGE, details={"max_amount": MAX_POINT})
    if amount <= 0:
        # Amounts below the 64-bit range cannot be echoed back in a JSON body.
        details = {"amount": amount} if amount >= -MAX_POINT else None
        raise InvalidAmountError(non_positive_message, details=details)
