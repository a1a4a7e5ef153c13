from datetime import datetime
from typing import List

from app.games.schemas import SessionOut
from app.schemas import CamelModel


class PlayerOut(CamelModel):
    id: int
    name: str
    total_winnings: float
    games_played: int
    wins: int
    losses: int
    biggest_win: float
    total_won: float
    total_lost: float
    created_at: datetime
    updated_at: datetime


class PlayerDetail(PlayerOut):
    win_rate: float
    avg_win: float
    history: List[SessionOut]
