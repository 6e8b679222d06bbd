"""SQLAlchemy database models"""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Float, String

from inkarena.infrastructure.database.connection import Base


class PlayerRecord(Base):
    """Registered player"""

    __tablename__ = "players"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(20), nullable=False)
    color = Column(String(20), nullable=False)
    last_score = Column(Float, default=0.0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class GameSessionRecord(Base):
    """Game session snapshot

    Players and marks live in ``payload``; status and duration are copied
    into columns for querying.
    """

    __tablename__ = "game_sessions"

    id = Column(String(36), primary_key=True, index=True)
    status = Column(String(20), default="waiting", index=True)  # waiting, active, finished
    duration = Column(Float, nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
