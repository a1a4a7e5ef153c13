import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.exceptions import StoreError
from app.leaderboard.schemas import LeaderboardEntryOut
from app.leaderboard.utils import get_leaderboard_data, rebuild_leaderboard

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[LeaderboardEntryOut], summary="Ranked leaderboard snapshot")
async def get_leaderboard(
    db: AsyncSession = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    try:
        return await get_leaderboard_data(db, skip=skip, limit=limit)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching leaderboard")
        raise StoreError("fetch leaderboard", str(exc)) from exc


@router.post("/rebuild", response_model=List[LeaderboardEntryOut], summary="Recompute the leaderboard from all players")
async def rebuild(db: AsyncSession = Depends(get_db)):
    return await rebuild_leaderboard(db)
