from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app import config
from app.database import get_db
from app.games import schemas
from app.games.utils import clear_all, get_recent_sessions, record_game
from app.leaderboard.utils import serialize_leaderboard
from app.websockets.leaderboard import manager

router = APIRouter()


@router.post("/game", response_model=schemas.SuccessResponse, summary="Record a game result")
async def submit_game(game: schemas.GameSubmission, db: AsyncSession = Depends(get_db)):
    record = await record_game(
        db,
        player_name=game.player_name,
        result=game.result,
        amount=game.amount,
        game_type=game.game_type,
    )
    if record.leaderboard is not None:
        await manager.broadcast({"leaderboard": serialize_leaderboard(record.leaderboard)})
    return {"success": True, "message": "Game recorded successfully"}


@router.get("/sessions", response_model=List[schemas.SessionOut], summary="Most recent game sessions")
async def get_sessions(
    db: AsyncSession = Depends(get_db),
    limit: int = Query(config.RECENT_SESSIONS_LIMIT, ge=1, le=500),
):
    return await get_recent_sessions(db, limit)


@router.delete("/clear-all", response_model=schemas.SuccessResponse, summary="Delete all players, sessions and leaderboard entries")
async def clear_all_data(db: AsyncSession = Depends(get_db)):
    await clear_all(db)
    await manager.broadcast({"leaderboard": []})
    return {"success": True, "message": "All data cleared successfully"}
