"""Game rules value object"""

import math
from dataclasses import dataclass
from typing import Any

from inkarena.domain.errors import InvalidRulesError
from inkarena.domain.value_objects.position import Position


@dataclass(frozen=True)
class GameRules:
    """Match configuration supplied by the host at session start"""

    # Match timing (seconds)
    game_duration: float = 180.0
    min_duration: float = 30.0
    max_duration: float = 600.0

    # Playing field, centred on the origin (metres)
    field_width: float = 4.0
    field_depth: float = 4.0

    # Ink
    max_marks_per_player: int = 100
    player_collision_radius: float = 0.5
    mark_min_size: float = 0.1
    mark_max_size: float = 2.0

    # Collision effects
    base_stun_duration: float = 3.0
    conflict_reduction_factor: float = 0.8

    def __post_init__(self) -> None:
        """Validate rule consistency"""
        if not math.isfinite(self.game_duration) or self.game_duration <= 0:
            raise InvalidRulesError("Game duration must be positive")
        if self.min_duration <= 0 or self.max_duration < self.min_duration:
            raise InvalidRulesError("Duration bounds are inconsistent")
        if not all(math.isfinite(side) and side > 0 for side in (self.field_width, self.field_depth)):
            raise InvalidRulesError("Field width and depth must be positive")
        if self.max_marks_per_player <= 0:
            raise InvalidRulesError("Max marks per player must be positive")
        if self.player_collision_radius <= 0:
            raise InvalidRulesError("Player collision radius must be positive")
        if self.mark_min_size <= 0:
            raise InvalidRulesError("Minimum mark size must be positive")
        if self.mark_max_size <= self.mark_min_size:
            raise InvalidRulesError("Maximum mark size must exceed minimum mark size")
        if self.base_stun_duration <= 0:
            raise InvalidRulesError("Stun duration must be positive")
        if not 0 < self.conflict_reduction_factor < 1:
            raise InvalidRulesError("Conflict reduction factor must be between 0 and 1")

    @classmethod
    def from_settings(cls, config: Any) -> "GameRules":
        """
        Build rules from the application settings.

        Args:
            config: object exposing the game fields of ``Settings``

        Returns:
            Validated GameRules instance
        """
        return cls(
            game_duration=config.game_duration,
            min_duration=config.min_game_duration,
            max_duration=config.max_game_duration,
            field_width=config.field_width,
            field_depth=config.field_depth,
            max_marks_per_player=config.max_marks_per_player,
            player_collision_radius=config.player_collision_radius,
            mark_min_size=config.mark_min_size,
            mark_max_size=config.mark_max_size,
        )

    def is_valid_duration(self, duration: float) -> bool:
        """Check duration against the configured bounds"""
        return math.isfinite(duration) and self.min_duration <= duration <= self.max_duration

    def is_valid_mark_size(self, size: float) -> bool:
        """Check mark radius against the configured bounds"""
        return math.isfinite(size) and self.mark_min_size <= size <= self.mark_max_size

    def is_position_in_field(self, position: Position) -> bool:
        """Check that x and z lie on the field; height is not bounded"""
        return abs(position.x) <= self.field_width / 2 and abs(position.z) <= self.field_depth / 2

    @property
    def max_mark_area(self) -> float:
        """Area of the largest possible mark"""
        return math.pi * self.mark_max_size * self.mark_max_size


DEFAULT_RULES = GameRules()
