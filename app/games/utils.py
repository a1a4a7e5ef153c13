import logging
from typing import List, NamedTuple, Optional

from sqlalchemy import case, delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AggregationError, StoreError
from app.games.schemas import GameResult
from app.leaderboard.utils import rebuild_leaderboard
from app.models import GameSession, LeaderboardEntry, Player, utcnow

logger = logging.getLogger(__name__)


class GameRecord(NamedTuple):
    player: Player
    session: GameSession
    # None when the follow-up leaderboard rebuild failed
    leaderboard: Optional[List[LeaderboardEntry]]


async def find_or_create_player(db: AsyncSession, name: str, now) -> Player:
    result = await db.execute(select(Player).where(Player.name == name))
    player = result.scalars().first()
    if player:
        return player

    player = Player(
        name=name,
        total_winnings=0.0,
        games_played=0,
        wins=0,
        losses=0,
        biggest_win=0.0,
        total_won=0.0,
        total_lost=0.0,
        created_at=now,
        updated_at=now,
    )
    db.add(player)
    await db.flush()
    logger.info("Created player %r", name)
    return player


def stat_deltas(result: GameResult, amount: float, now) -> dict:
    """
    Column expressions for one game, applied by the database so concurrent writers don't lose increments.

    total_winnings is derived from the new won/lost sums in the same statement, so it
    always equals total_won - total_lost exactly, even for fractional amounts.
    """
    won_delta = amount if result is GameResult.win else 0.0
    lost_delta = amount if result is GameResult.loss else 0.0
    values = {
        "total_winnings": (Player.total_won + won_delta) - (Player.total_lost + lost_delta),
        "games_played": Player.games_played + 1,
        "total_won": Player.total_won + won_delta,
        "total_lost": Player.total_lost + lost_delta,
        "updated_at": now,
    }
    if result is GameResult.win:
        values["wins"] = Player.wins + 1
        values["biggest_win"] = case(
            (Player.biggest_win < amount, amount),
            else_=Player.biggest_win,
        )
    else:
        values["losses"] = Player.losses + 1
    return values


async def apply_game_to_player(db: AsyncSession, player: Player, result: GameResult, amount: float, game_type: str, now) -> GameSession:
    """Stage the counter update and the session row; the caller commits."""
    await db.execute(
        update(Player)
        .where(Player.id == player.id)
        .values(**stat_deltas(result, amount, now))
        .execution_options(synchronize_session=False)
    )

    session = GameSession(
        player_name=player.name,
        player_id=player.id,
        result=result.value,
        amount=amount if result is GameResult.win else -amount,
        game_type=game_type,
        date=now,
        created_at=now,
    )
    db.add(session)
    return session


async def _apply_game(db: AsyncSession, player_name: str, result: GameResult, amount: float, game_type: str):
    now = utcnow()
    player = await find_or_create_player(db, player_name, now)
    session = await apply_game_to_player(db, player, result, amount, game_type, now)
    await db.commit()
    return player, session


async def record_game(db: AsyncSession, player_name: str, result, amount: float, game_type: str) -> GameRecord:
    """
    Apply one game result to the player's aggregate, append the session and rebuild the leaderboard.

    The player update and the session insert commit together. A failed rebuild is
    logged and leaves the recorded game in place; the snapshot catches up on the
    next successful rebuild.
    """
    result = GameResult(result)

    # A second attempt covers a concurrent request creating the same player first.
    for attempt in (1, 2):
        try:
            player, session = await _apply_game(db, player_name, result, amount, game_type)
            break
        except IntegrityError as exc:
            await db.rollback()
            if attempt == 1:
                logger.warning("Player %r created concurrently, retrying", player_name)
                continue
            logger.exception("Error recording game")
            raise StoreError("record game", str(exc)) from exc
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Error recording game")
            raise StoreError("record game", str(exc)) from exc

    logger.info("Recorded %s of %.2f for %r (%s)", result.value, amount, player_name, game_type)

    # The game is committed at this point; a failed reload only leaves the returned player stale.
    try:
        await db.refresh(player)
    except SQLAlchemyError as exc:
        logger.warning("Could not reload player %r after recording game: %s", player_name, exc)

    try:
        entries = await rebuild_leaderboard(db)
    except AggregationError:
        entries = None

    return GameRecord(player, session, entries)


async def get_recent_sessions(db: AsyncSession, limit: int) -> List[GameSession]:
    try:
        result = await db.execute(
            select(GameSession)
            .order_by(GameSession.created_at.desc(), GameSession.id.desc())
            .limit(limit)
        )
    except SQLAlchemyError as exc:
        logger.exception("Error fetching sessions")
        raise StoreError("fetch sessions", str(exc)) from exc
    return result.scalars().all()


async def clear_all(db: AsyncSession) -> None:
    try:
        await db.execute(delete(GameSession))
        await db.execute(delete(LeaderboardEntry))
        await db.execute(delete(Player))
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Error clearing data")
        raise StoreError("clear data", str(exc)) from exc
    logger.info("All players, sessions and leaderboard entries cleared")
