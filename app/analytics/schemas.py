from datetime import datetime
from typing import List

from app.games.schemas import SessionOut
from app.players.schemas import PlayerOut
from app.schemas import CamelModel


class SummaryStats(CamelModel):
    total_games: int
    total_players: int
    biggest_win: float
    avg_pot: float


class ExportOut(CamelModel):
    players: List[PlayerOut]
    games: List[SessionOut]
    export_date: datetime
