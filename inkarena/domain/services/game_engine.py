"""Session state machine: waiting -> active -> finished

Every operation takes the current session value plus inputs and returns a
new value. Nothing here schedules work, keeps state between calls or logs.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, Optional, Tuple

from inkarena.domain.entities.game_session import GameSession
from inkarena.domain.entities.ink_mark import InkMark
from inkarena.domain.entities.player import Player
from inkarena.domain.errors import (
    GameNotActiveError,
    GameTimeExpiredError,
    InvalidMarkSizeError,
    InvalidPositionError,
    MarkLimitExceededError,
    NoActiveGameError,
    NoPlayersError,
    PlayerNotActiveError,
    PlayerNotInGameError,
    StaleIntentError,
)
from inkarena.domain.services.collision_service import CollisionEffect, CollisionService
from inkarena.domain.services.score_service import GameResult, ScoreService
from inkarena.domain.value_objects.game_rules import DEFAULT_RULES, GameRules
from inkarena.domain.value_objects.position import Position

DEFAULT_FIELD_AREA = 16.0


@dataclass(frozen=True)
class PlayerEffect:
    """Collision effect applied to one player by one mark"""

    player_id: str
    mark_id: str
    effect: CollisionEffect


@dataclass(frozen=True)
class ShotOutcome:
    """Updated session plus everything a renderer needs about the shot"""

    session: GameSession
    placed_mark: InkMark
    merged: bool
    removed_mark_ids: Tuple[str, ...]
    reduced_marks: Tuple[InkMark, ...]
    effects: Tuple[PlayerEffect, ...]


@dataclass(frozen=True)
class MoveOutcome:
    """Updated session after a position update"""

    session: GameSession
    player: Player
    effects: Tuple[PlayerEffect, ...]


@dataclass(frozen=True)
class CoverageSnapshot:
    """Live coverage projection"""

    per_player: Dict[str, float]
    total: float
    remaining_time: float


@dataclass(frozen=True)
class GameOutcome:
    """Finished session with final standings"""

    session: GameSession
    results: Tuple[GameResult, ...]
    winner: Optional[Player]
    total_coverage: float

    @property
    def is_draw(self) -> bool:
        return self.winner is None


class GameEngine:
    """Applies game actions to session values"""

    def __init__(
        self,
        rules: GameRules = DEFAULT_RULES,
        field_area: float = DEFAULT_FIELD_AREA,
        min_win_margin: float = 3.0,
        tie_break_by_mark_count: bool = True,
    ):
        ScoreService.validate_field_area(field_area)

        self.rules = rules
        self.field_area = field_area
        self.collision_service = CollisionService(rules)
        self.score_service = ScoreService(
            rules,
            min_win_margin=min_win_margin,
            tie_break_by_mark_count=tie_break_by_mark_count,
        )

    def start(
        self,
        players: Iterable[Player],
        duration: Optional[float] = None,
        now: Optional[datetime] = None,
        session_id: Optional[str] = None,
    ) -> GameSession:
        """Validate players and duration, create the session and activate it"""
        players = tuple(players)
        if not players:
            raise NoPlayersError()

        session = GameSession.create(
            players,
            self.rules.game_duration if duration is None else duration,
            rules=self.rules,
            session_id=session_id,
        )
        return session.start(now or _utc_now())

    def shoot_ink(
        self,
        session: GameSession,
        player_id: str,
        position: Position,
        size: float,
        now: Optional[datetime] = None,
        sent_at: Optional[datetime] = None,
    ) -> ShotOutcome:
        """
        Place a mark for a player and resolve its consequences.

        Players within reach of the new mark are stunned; overlapping marks
        are merged (same color) or shrunk (different color).

        Args:
            now: server clock used for stuns, expiry and the mark timestamp
            sent_at: client timestamp of the intent, used only for ordering

        Raises:
            PlayerNotInGameError, PlayerNotActiveError, GameNotActiveError,
            InvalidMarkSizeError, GameTimeExpiredError, InvalidPositionError,
            MarkLimitExceededError, StaleIntentError: checked in this order
        """
        now = now or _utc_now()

        if not session.has_player(player_id):
            raise PlayerNotInGameError(f"Player {player_id} is not part of game {session.id}")

        if session.is_active:
            session = self.recover_players(session, now)
        shooter = session.player_by_id(player_id)

        if not shooter.is_active:
            raise PlayerNotActiveError(f"Player {shooter.name} is not currently active")

        if not session.is_active:
            raise GameNotActiveError(f"Game {session.id} is {session.status.value}")

        if not self.rules.is_valid_mark_size(size):
            raise InvalidMarkSizeError(
                f"Invalid ink mark size: {size}. Must be between "
                f"{self.rules.mark_min_size} and {self.rules.mark_max_size}"
            )

        if session.remaining_time(now) <= 0:
            raise GameTimeExpiredError()

        self._check_position(position)

        if len(session.marks_by_owner(player_id)) >= self.rules.max_marks_per_player:
            raise MarkLimitExceededError()

        session = self._record_intent(session, sent_at, now)

        mark = InkMark.create(
            position=position,
            color=shooter.color,
            radius=size,
            owner_id=shooter.id,
            min_size=self.rules.mark_min_size,
            max_size=self.rules.mark_max_size,
            created_at=now,
        )

        effects = []
        for player in session.players:
            effect = self.collision_service.collision_effect(player, mark)
            if effect.is_stunned:
                session = session.update_player(
                    player.stun(now + timedelta(seconds=effect.stun_duration))
                )
                effects.append(PlayerEffect(player_id=player.id, mark_id=mark.id, effect=effect))

        resolution = self.collision_service.resolve_placement(mark, session.marks)
        for mark_id in resolution.removed_mark_ids:
            session = session.remove_mark(mark_id)
        for reduced in resolution.reduced_marks:
            session = session.replace_mark(reduced)
        session = session.add_mark(resolution.placed_mark)

        return ShotOutcome(
            session=session,
            placed_mark=resolution.placed_mark,
            merged=resolution.merged,
            removed_mark_ids=resolution.removed_mark_ids,
            reduced_marks=resolution.reduced_marks,
            effects=tuple(effects),
        )

    def move_player(
        self,
        session: GameSession,
        player_id: str,
        position: Position,
        now: Optional[datetime] = None,
        sent_at: Optional[datetime] = None,
    ) -> MoveOutcome:
        """Update a player's position; walking into enemy ink stuns"""
        now = now or _utc_now()

        if not session.has_player(player_id):
            raise PlayerNotInGameError(f"Player {player_id} is not part of game {session.id}")

        if not session.is_active:
            raise GameNotActiveError(f"Game {session.id} is {session.status.value}")

        self._check_position(position)

        session = self._record_intent(session, sent_at, now)
        session = self.recover_players(session, now)
        player = session.player_by_id(player_id).with_position(position)

        effects = []
        hits = self.collision_service.player_mark_collisions(player, session.marks)
        if hits:
            # The largest mark decides the stun
            mark = max(hits, key=lambda hit: hit.radius)
            effect = self.collision_service.collision_effect(player, mark)
            player = player.stun(now + timedelta(seconds=effect.stun_duration))
            effects.append(PlayerEffect(player_id=player.id, mark_id=mark.id, effect=effect))

        session = session.update_player(player)
        return MoveOutcome(session=session, player=player, effects=tuple(effects))

    def end_game(
        self,
        session: GameSession,
        now: Optional[datetime] = None,
        sent_at: Optional[datetime] = None,
    ) -> GameOutcome:
        """Finish an active session and compute final standings"""
        if not session.is_active:
            raise NoActiveGameError(f"Game {session.id} is {session.status.value}")

        now = now or _utc_now()
        session = self._record_intent(session, sent_at, now)
        marks = session.marks

        for player in self.score_service.score_players(session.players, marks, self.field_area):
            session = session.update_player(player)
        session = session.end(now)

        winner = self.score_service.determine_winner(session.players, marks)
        results = self.score_service.game_results(
            session.players,
            marks,
            self.field_area,
            remaining_time=session.remaining_time(now),
            total_time=session.duration,
            winner_id=winner.id if winner else None,
        )

        return GameOutcome(
            session=session,
            results=tuple(results),
            winner=winner,
            total_coverage=self.score_service.total_coverage(marks, self.field_area),
        )

    def coverage(self, session: GameSession, now: Optional[datetime] = None) -> CoverageSnapshot:
        """Read-only coverage projection for any session state"""
        return CoverageSnapshot(
            per_player={
                player.id: self.score_service.player_coverage(player.id, session.marks, self.field_area)
                for player in session.players
            },
            total=self.score_service.total_coverage(session.marks, self.field_area),
            remaining_time=session.remaining_time(now),
        )

    def should_end(self, session: GameSession, now: Optional[datetime] = None) -> bool:
        """Finished already, or active with the clock run out"""
        return session.is_finished or session.is_expired(now)

    def _check_position(self, position: Position) -> None:
        if not position.is_valid():
            raise InvalidPositionError(f"Invalid position: {position}")
        if not self.rules.is_position_in_field(position):
            raise InvalidPositionError(f"Position {position} is outside the field")

    @staticmethod
    def _record_intent(
        session: GameSession, sent_at: Optional[datetime], now: datetime
    ) -> GameSession:
        """
        Order a client intent against the ones already applied.

        Timestamps ahead of the server clock are clamped to it. Intents stamped
        before the game started or before the last applied intent are rejected.
        """
        if sent_at is None:
            return session

        sent_at = min(sent_at, now)
        if sent_at < session.started_at or (
            session.last_intent_at is not None and sent_at < session.last_intent_at
        ):
            raise StaleIntentError(
                f"Intent sent at {sent_at.isoformat()} is older than the current state of game {session.id}"
            )
        return session.record_intent(sent_at)

    @staticmethod
    def recover_players(session: GameSession, now: datetime) -> GameSession:
        """Reactivate players whose stun has worn off"""
        for player in session.players:
            recovered = player.recover(now)
            if recovered is not player:
                session = session.update_player(recovered)
        return session


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)
