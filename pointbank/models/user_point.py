from pydantic import BaseModel, ConfigDict, Field

# Balances, amounts and user ids are signed 64-bit values, as in the JSON responses.
MAX_POINT = 2**63 - 1
MIN_USER_ID = -(2**63)


class UserPoint(BaseModel):
    """Current balance of one user. An unseen user reads as zero points."""

    model_config = ConfigDict(frozen=True)

    id: int
    point: int = Field(default=0, ge=0, le=MAX_POINT)
    update_millis: int = 0

    @classmethod
    def empty(cls, user_id: int) -> "UserPoint":
        return cls(id=user_id, point=0, update_millis=0)
