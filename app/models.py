from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, UTC
from .database import Base


def utcnow():
    # Naive UTC, matching what the DateTime columns hand back on read.
    return datetime.now(UTC).replace(tzinfo=None)


class Player(Base):
    __tablename__ = "players"
    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, index=True, nullable=False)
    total_winnings = Column(Float, nullable=False, default=0.0)
    games_played = Column(Integer, nullable=False, default=0)
    wins = Column(Integer, nullable=False, default=0)
    losses = Column(Integer, nullable=False, default=0)
    biggest_win = Column(Float, nullable=False, default=0.0)
    total_won = Column(Float, nullable=False, default=0.0)
    total_lost = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)
    sessions = relationship("GameSession", back_populates="player")


class GameSession(Base):
    __tablename__ = "sessions"
    id = Column(Integer, primary_key=True)
    player_id = Column(Integer, ForeignKey("players.id"), index=True)
    player_name = Column(String, nullable=False)
    result = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    game_type = Column(String, nullable=False)
    date = Column(DateTime, default=utcnow)
    created_at = Column(DateTime, default=utcnow, index=True)
    player = relationship("Player", back_populates="sessions")


class LeaderboardEntry(Base):
    __tablename__ = "leaderboard"
    id = Column(Integer, primary_key=True)
    rank = Column(Integer, nullable=False, index=True)
    player_id = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    total_winnings = Column(Float, nullable=False)
    games_played = Column(Integer, nullable=False)
    wins = Column(Integer, nullable=False)
    losses = Column(Integer, nullable=False)
    biggest_win = Column(Float, nullable=False)
    total_won = Column(Float, nullable=False)
    total_lost = Column(Float, nullable=False)
    win_rate = Column(Float, nullable=False)
    avg_win = Column(Float, nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime, default=utcnow)
