"""Game session domain entity"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Iterable, List, Optional, Tuple

from inkarena.domain.entities.ink_mark import InkMark
from inkarena.domain.entities.player import Player
from inkarena.domain.errors import (
    DuplicatePlayerColorsError,
    DuplicatePlayerNamesError,
    GameNotActiveError,
    InvalidDurationError,
    InvalidPlayerCountError,
)
from inkarena.domain.value_objects.game_rules import DEFAULT_RULES, GameRules


class SessionStatus(Enum):
    """Game session status"""

    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


@dataclass(frozen=True)
class GameSession:
    """Game session domain entity

    The session is the unit of mutation: every change produces a new value.
    Status only moves forward (waiting -> active -> finished).
    """

    id: str
    players: Tuple[Player, ...]
    duration: float
    status: SessionStatus = SessionStatus.WAITING
    marks: Tuple[InkMark, ...] = ()
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    last_intent_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    REQUIRED_PLAYER_COUNT: ClassVar[int] = 2

    def __post_init__(self) -> None:
        """Normalize collections and enforce player invariants"""
        object.__setattr__(self, "players", tuple(self.players))
        object.__setattr__(self, "marks", tuple(self.marks))

        if len(self.players) != self.REQUIRED_PLAYER_COUNT:
            raise InvalidPlayerCountError(
                f"Invalid player count: {len(self.players)}. "
                f"Expected {self.REQUIRED_PLAYER_COUNT} players"
            )

        names = {player.name.strip() for player in self.players}
        if len(names) != len(self.players):
            raise DuplicatePlayerNamesError()

        colors = {player.color for player in self.players}
        if len(colors) != len(self.players):
            raise DuplicatePlayerColorsError()

    @classmethod
    def create(
        cls,
        players: Iterable[Player],
        duration: float,
        rules: GameRules = DEFAULT_RULES,
        session_id: Optional[str] = None,
    ) -> "GameSession":
        """Create a waiting session after validating players and duration"""
        players = tuple(players)
        session = cls(
            id=session_id or str(uuid.uuid4()),
            players=players,
            duration=duration,
        )

        if not rules.is_valid_duration(duration):
            raise InvalidDurationError(
                f"Invalid game duration: {duration} seconds. Must be between "
                f"{rules.min_duration} and {rules.max_duration} seconds"
            )

        return session

    # State transitions

    def start(self, now: Optional[datetime] = None) -> "GameSession":
        """Move a waiting session to active; any other status is left as is"""
        if self.status != SessionStatus.WAITING:
            return self
        return replace(
            self,
            status=SessionStatus.ACTIVE,
            started_at=now or datetime.now(timezone.utc),
        )

    def end(self, now: Optional[datetime] = None) -> "GameSession":
        """Move an active session to finished; any other status is left as is"""
        if self.status != SessionStatus.ACTIVE:
            return self
        return replace(
            self,
            status=SessionStatus.FINISHED,
            ended_at=now or datetime.now(timezone.utc),
        )

    def record_intent(self, sent_at: datetime) -> "GameSession":
        """Advance the ordering key of applied player intents"""
        if self.last_intent_at is not None and sent_at <= self.last_intent_at:
            return self
        return replace(self, last_intent_at=sent_at)

    # Marks

    def add_mark(self, mark: InkMark) -> "GameSession":
        self._ensure_not_finished()
        return replace(self, marks=self.marks + (mark,))

    def replace_mark(self, mark: InkMark) -> "GameSession":
        """Swap in a mark with the same id"""
        self._ensure_not_finished()
        return replace(
            self,
            marks=tuple(mark if existing.id == mark.id else existing for existing in self.marks),
        )

    def remove_mark(self, mark_id: str) -> "GameSession":
        self._ensure_not_finished()
        return replace(self, marks=tuple(mark for mark in self.marks if mark.id != mark_id))

    def marks_by_owner(self, player_id: str) -> List[InkMark]:
        return [mark for mark in self.marks if mark.owner_id == player_id]

    def mark_by_id(self, mark_id: str) -> Optional[InkMark]:
        return next((mark for mark in self.marks if mark.id == mark_id), None)

    # Players

    def update_player(self, updated: Player) -> "GameSession":
        """Swap in a player with the same id"""
        self._ensure_not_finished()
        return replace(
            self,
            players=tuple(updated if player.id == updated.id else player for player in self.players),
        )

    def player_by_id(self, player_id: str) -> Optional[Player]:
        return next((player for player in self.players if player.id == player_id), None)

    def has_player(self, player_id: str) -> bool:
        return self.player_by_id(player_id) is not None

    # Time

    def remaining_time(self, now: Optional[datetime] = None) -> float:
        """Seconds left in the match

        Waiting sessions report the full duration; finished sessions report
        the time that was left when they ended.
        """
        if self.started_at is None:
            return self.duration

        if self.status == SessionStatus.FINISHED and self.ended_at is not None:
            reference = self.ended_at
        else:
            reference = now or datetime.now(timezone.utc)

        elapsed = (reference - self.started_at).total_seconds()
        return max(0.0, self.duration - elapsed)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Active session whose clock has run out"""
        return self.is_active and self.remaining_time(now) <= 0

    @property
    def is_waiting(self) -> bool:
        return self.status == SessionStatus.WAITING

    @property
    def is_active(self) -> bool:
        """Check if session is active"""
        return self.status == SessionStatus.ACTIVE

    @property
    def is_finished(self) -> bool:
        """Check if session is finished"""
        return self.status == SessionStatus.FINISHED

    def _ensure_not_finished(self) -> None:
        if self.is_finished:
            raise GameNotActiveError("Finished game sessions are read-only")

    def __str__(self) -> str:
        return (
            f"GameSession(id={self.id}, players={len(self.players)}, "
            f"status={self.status.value}, duration={self.duration}s)"
        )
