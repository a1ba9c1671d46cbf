from pointbank.models.point_history import PointHistory, TransactionType
from pointbank.models.user_point import MAX_POINT, UserPoint

__all__ = [
    "MAX_POINT",
    "PointHistory",
    "TransactionType",
    "UserPoint",
]
