from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import Field, StringConstraints

from app.schemas import CamelModel

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class GameResult(str, Enum):
    win = "win"
    loss = "loss"


class GameSubmission(CamelModel):
    player_name: RequiredStr
    result: GameResult
    amount: float = Field(gt=0, allow_inf_nan=False)
    game_type: RequiredStr


class SuccessResponse(CamelModel):
    success: bool
    message: str


class SessionOut(CamelModel):
    id: int
    player_name: str
    player_id: int
    result: GameResult
    amount: float
    game_type: str
    date: datetime
    created_at: datetime
