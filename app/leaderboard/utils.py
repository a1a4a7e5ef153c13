import logging
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AggregationError
from app.leaderboard.schemas import LeaderboardEntryOut
from app.models import LeaderboardEntry, Player, utcnow

logger = logging.getLogger(__name__)


def win_rate(wins: int, games_played: int) -> float:
    return wins / games_played * 100 if games_played > 0 else 0.0


def avg_win(total_won: float, wins: int) -> float:
    return total_won / wins if wins > 0 else 0.0


def rank_players(players: Iterable, now=None) -> List[LeaderboardEntry]:
    """
    Build leaderboard entries from player aggregates.

    Ordered by total winnings descending; ties go to the alphabetically first
    name, then the lower player id, so the ordering is deterministic.
    """
    now = now or utcnow()
    ordered = sorted(players, key=lambda p: (-p.total_winnings, p.name, p.id))
    return [
        LeaderboardEntry(
            rank=index + 1,
            player_id=p.id,
            name=p.name,
            total_winnings=p.total_winnings,
            games_played=p.games_played,
            wins=p.wins,
            losses=p.losses,
            biggest_win=p.biggest_win,
            total_won=p.total_won,
            total_lost=p.total_lost,
            win_rate=win_rate(p.wins, p.games_played),
            avg_win=avg_win(p.total_won, p.wins),
            created_at=p.created_at,
            updated_at=now,
        )
        for index, p in enumerate(ordered)
    ]


async def rebuild_leaderboard(db: AsyncSession) -> List[LeaderboardEntry]:
    """Recompute the snapshot from every player and replace the stored one in a single transaction."""
    try:
        # Reload rows already in the session so the snapshot reflects committed values.
        result = await db.execute(select(Player).execution_options(populate_existing=True))
        entries = rank_players(result.scalars().all())

        await db.execute(delete(LeaderboardEntry))
        db.add_all(entries)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Error updating leaderboard: %s", exc)
        raise AggregationError(str(exc)) from exc

    logger.debug("Leaderboard rebuilt with %d entries", len(entries))
    return entries


async def get_leaderboard_data(db: AsyncSession, skip: int = 0, limit: Optional[int] = None) -> List[LeaderboardEntry]:
    query = select(LeaderboardEntry).order_by(LeaderboardEntry.rank.asc()).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


def serialize_leaderboard(entries: Iterable[LeaderboardEntry]) -> List[dict]:
    return [
        LeaderboardEntryOut.model_validate(entry).model_dump(by_alias=True, mode="json")
        for entry in entries
    ]
