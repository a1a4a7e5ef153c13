from datetime import datetime
from typing import Optional

from app.schemas import CamelModel


class LeaderboardEntryOut(CamelModel):
    rank: int
    player_id: int
    name: str
    total_winnings: float
    games_played: int
    wins: int
    losses: int
    biggest_win: float
    total_won: float
    total_lost: float
    win_rate: float
    avg_win: float
    created_at: Optional[datetime] = None
    updated_at: datetime
