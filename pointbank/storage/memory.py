"""In-process point tables. Each call runs its dict access under a short internal lock."""

import threading
from collections import defaultdict

from pointbank.models.point_history import PointHistory, TransactionType
from pointbank.models.user_point import MAX_POINT, UserPoint
from pointbank.storage.base import BalanceStore, HistoryLog, now_millis


class MemoryBalanceStore(BalanceStore):
    def __init__(self, latency_ms: int = 0) -> None:
        super().__init__(latency_ms)
        self._table: dict[int, UserPoint] = {}
        self._lock = threading.Lock()

    async def get(self, user_id: int) -> UserPoint:
        await self._throttle()
        with self._lock:
            return self._table.get(user_id) or UserPoint.empty(user_id)

    async def set(self, user_id: int, point: int) -> UserPoint:
        if not 0 <= point <= MAX_POINT:
            raise ValueError(f"Balance out of range: {point}")
        await self._throttle()
        stored = UserPoint(id=user_id, point=point, update_millis=now_millis())
        with self._lock:
            self._table[user_id] = stored
        return stored


class MemoryHistoryLog(HistoryLog):
    def __init__(self, latency_ms: int = 0) -> None:
        super().__init__(latency_ms)
        self._by_user: dict[int, list[PointHistory]] = defaultdict(list)
        self._next_id = 1
        self._lock = threading.Lock()

    async def append(
        self,
        user_id: int,
        amount: int,
        type: TransactionType,
        update_millis: int,
    ) -> PointHistory:
        await self._throttle()
        with self._lock:
            record = PointHistory(
                id=self._next_id,
                user_id=user_id,
                amount=amount,
                type=type,
                update_millis=update_millis,
            )
            self._next_id += 1
            self._by_user[user_id].append(record)
        return record

    async def list_by_user(self, user_id: int) -> list[PointHistory]:
        await self._throttle()
        with self._lock:
            return list(self._by_user.get(user_id, ()))
