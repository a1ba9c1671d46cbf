from enum import Enum

from pydantic import BaseModel, ConfigDict


class TransactionType(str, Enum):
    CHARGE = "CHARGE"
    USE = "USE"


class PointHistory(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int  # sequence assigned by the history log, 1-based
    user_id: int
    amount: int  # positive = charge, negative = use
    type: TransactionType
    update_millis: int
