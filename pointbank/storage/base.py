import asyncio
import random
import time
from abc import ABC, abstractmethod

from pointbank.core.config import get_settings
from pointbank.models.point_history import PointHistory, TransactionType
from pointbank.models.user_point import UserPoint


def now_millis() -> int:
    return int(time.time() * 1000)


class _Throttled:
    """Random per-call delay in [0, latency_ms], taken outside any table lock."""

    def __init__(self, latency_ms: int = 0) -> None:
        if latency_ms < 0:
            raise ValueError("latency_ms must be >= 0")
        self.latency_ms = latency_ms

    async def _throttle(self) -> None:
        if self.latency_ms:
            await asyncio.sleep(random.uniform(0, self.latency_ms) / 1000)


class BalanceStore(_Throttled, ABC):
    @abstractmethod
    async def get(self, user_id: int) -> UserPoint:
        """Return the user's balance; a zero balance if never written."""
        ...

    @abstractmethod
    async def set(self, user_id: int, point: int) -> UserPoint:
        """Overwrite the user's balance and timestamp; return the stored value."""
        ...


class HistoryLog(_Throttled, ABC):
    @abstractmethod
    async def append(
        self,
        user_id: int,
        amount: int,
        type: TransactionType,
        update_millis: int,
    ) -> PointHistory:
        """Append one immutable record; return it with its sequence id."""
        ...

    @abstractmethod
    async def list_by_user(self, user_id: int) -> list[PointHistory]:
        """All records for the user, in append order."""
        ...


def get_storage() -> tuple[BalanceStore, HistoryLog]:
    settings = get_settings()
    from pointbank.storage.memory import MemoryBalanceStore, MemoryHistoryLog
    return (
        MemoryBalanceStore(latency_ms=settings.storage_latency_ms),
        MemoryHistoryLog(latency_ms=settings.storage_latency_ms),
    )
