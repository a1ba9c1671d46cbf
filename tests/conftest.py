from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pointbank.services.points import PointService
from pointbank.storage.memory import MemoryBalanceStore, MemoryHistoryLog

# Small random delay on every table call so concurrent requests really interleave
TEST_LATENCY_MS = 3


@pytest.fixture
def balances() -> MemoryBalanceStore:
    return MemoryBalanceStore(latency_ms=TEST_LATENCY_MS)


@pytest.fixture
def histories() -> MemoryHistoryLog:
    return MemoryHistoryLog(latency_ms=TEST_LATENCY_MS)


@pytest.fixture
def service(balances, histories) -> PointService:
    return PointService(balances, histories)


@pytest_asyncio.fixture
async def client(service) -> AsyncGenerator[AsyncClient, None]:
    from pointbank.deps import get_point_service
    from pointbank.main import app
    app.dependency_overrides[get_point_service] = lambda: service
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
