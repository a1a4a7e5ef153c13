import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.database import get_db
from app.exceptions import PlayerNotFoundError, StoreError
from app.leaderboard.utils import avg_win, win_rate
from app.models import GameSession, Player
from app.players import schemas

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[schemas.PlayerOut], summary="All player aggregates")
async def get_players(db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(select(Player).order_by(Player.id))
    except SQLAlchemyError as exc:
        logger.exception("Error fetching players")
        raise StoreError("fetch players", str(exc)) from exc
    return result.scalars().all()


@router.get("/{name}", response_model=schemas.PlayerDetail, summary="Player statistics and recent games")
async def get_player(
    name: str,
    db: AsyncSession = Depends(get_db),
    limit: int = Query(20, ge=1, le=500),
):
    try:
        player_result = await db.execute(select(Player).where(Player.name == name))
        player = player_result.scalars().first()
        if not player:
            raise PlayerNotFoundError(name)

        games_result = await db.execute(
            select(GameSession)
            .where(GameSession.player_id == player.id)
            .order_by(GameSession.created_at.desc(), GameSession.id.desc())
            .limit(limit)
        )
        games = games_result.scalars().all()
    except SQLAlchemyError as exc:
        logger.exception("Error fetching player %r", name)
        raise StoreError("fetch player", str(exc)) from exc

    return {
        **schemas.PlayerOut.model_validate(player).model_dump(),
        "win_rate": win_rate(player.wins, player.games_played),
        "avg_win": avg_win(player.total_won, player.wins),
        "history": games,
    }
