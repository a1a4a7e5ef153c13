import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.analytics import schemas
from app.database import get_db
from app.exceptions import StoreError
from app.models import GameSession, Player, utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats", response_model=schemas.SummaryStats, summary="Totals across all players and games")
async def get_summary_stats(db: AsyncSession = Depends(get_db)):
    try:
        games_result = await db.execute(
            select(
                func.count(GameSession.id),
                func.avg(func.abs(GameSession.amount)),
            )
        )
        total_games, avg_pot = games_result.one()

        players_result = await db.execute(
            select(
                func.count(Player.id),
                func.max(Player.biggest_win),
            )
        )
        total_players, biggest_win = players_result.one()
    except SQLAlchemyError as exc:
        logger.exception("Error fetching stats")
        raise StoreError("fetch stats", str(exc)) from exc

    return {
        "total_games": total_games,
        "total_players": total_players,
        "biggest_win": max(biggest_win or 0, 0),
        "avg_pot": round(avg_pot or 0, 2),
    }


@router.get("/export", response_model=schemas.ExportOut, summary="Full dump of players and games")
async def export_data(db: AsyncSession = Depends(get_db)):
    try:
        players_result = await db.execute(select(Player).order_by(Player.id))
        games_result = await db.execute(
            select(GameSession).order_by(GameSession.created_at.desc(), GameSession.id.desc())
        )
    except SQLAlchemyError as exc:
        logger.exception("Error exporting data")
        raise StoreError("export data", str(exc)) from exc

    return {
        "players": players_result.scalars().all(),
        "games": games_result.scalars().all(),
        "export_date": utcnow(),
    }
