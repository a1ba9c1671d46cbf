from pointbank.core.config import get_settings
from pointbank.core.logging import get_logger
from pointbank.models.point_history import TransactionType
from pointbank.storage.base import BalanceStore, HistoryLog, get_storage

log = get_logger(__name__)

# user_id -> starting balance, each recorded as one CHARGE
MOCK_BALANCES = {1: 1000, 2: 500}


async def seed_mock_data(balances: BalanceStore, histories: HistoryLog) -> None:
    """Write the demo users straight into the tables, bypassing the service."""
    for user_id, point in MOCK_BALANCES.items():
        stored = await balances.set(user_id, point)
        await histories.append(user_id, point, TransactionType.CHARGE, stored.update_millis)
    log.info("mock_data_seeded", users=len(MOCK_BALANCES))


async def init_db() -> tuple[BalanceStore, HistoryLog]:
    settings = get_settings()
    balances, histories = get_storage()
    if settings.seed_mock_data:
        await seed_mock_data(balances, histories)
    return balances, histories
