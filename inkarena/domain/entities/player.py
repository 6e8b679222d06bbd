"""Player domain entity"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import ClassVar, Optional

from inkarena.domain.errors import InvalidNameError
from inkarena.domain.value_objects.game_score import ZERO_SCORE, GameScore
from inkarena.domain.value_objects.player_color import PlayerColor
from inkarena.domain.value_objects.position import Position


@dataclass(frozen=True)
class Player:
    """Player domain entity

    Mutators return a new Player; the score is only ever replaced with a
    recomputed value.
    """

    id: str
    name: str
    color: PlayerColor
    position: Position = field(default_factory=Position.origin)
    is_active: bool = True
    score: GameScore = ZERO_SCORE
    stunned_until: Optional[datetime] = None

    MAX_NAME_LENGTH: ClassVar[int] = 20

    def __post_init__(self) -> None:
        """Validate player name"""
        if not self.is_valid_name(self.name):
            raise InvalidNameError(f"Invalid player name: {self.name!r}")

    @classmethod
    def create(
        cls,
        name: str,
        color: PlayerColor,
        position: Optional[Position] = None,
        player_id: Optional[str] = None,
    ) -> "Player":
        """Create a new active player with a fresh id"""
        return cls(
            id=player_id or str(uuid.uuid4()),
            name=name.strip(),
            color=color,
            position=position or Position.origin(),
        )

    @classmethod
    def is_valid_name(cls, name: str) -> bool:
        """Non-empty after trimming and at most MAX_NAME_LENGTH characters"""
        trimmed = name.strip()
        return 0 < len(trimmed) <= cls.MAX_NAME_LENGTH

    def with_position(self, position: Position) -> "Player":
        return replace(self, position=position)

    def with_score(self, score: GameScore) -> "Player":
        return replace(self, score=score)

    def activate(self) -> "Player":
        return replace(self, is_active=True, stunned_until=None)

    def deactivate(self) -> "Player":
        return replace(self, is_active=False)

    def stun(self, until: datetime) -> "Player":
        """Deactivate until the given time"""
        return replace(self, is_active=False, stunned_until=until)

    def is_stunned(self, now: datetime) -> bool:
        """Check if a stun is still running at ``now``"""
        return self.stunned_until is not None and now < self.stunned_until

    def recover(self, now: datetime) -> "Player":
        """Reactivate the player once the stun has worn off

        Players deactivated without a stun deadline stay inactive.
        """
        if self.is_active or self.stunned_until is None or self.is_stunned(now):
            return self
        return self.activate()

    def __str__(self) -> str:
        return f"Player({self.name}, {self.color.value}, active={self.is_active})"
