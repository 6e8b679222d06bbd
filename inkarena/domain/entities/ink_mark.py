"""Ink mark domain entity"""

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

from inkarena.domain.errors import InvalidSizeError
from inkarena.domain.value_objects.game_rules import DEFAULT_RULES
from inkarena.domain.value_objects.player_color import PlayerColor
from inkarena.domain.value_objects.position import Position


@dataclass(frozen=True)
class InkMark:
    """Circular patch of ink on the field"""

    id: str
    position: Position
    color: PlayerColor
    radius: float
    owner_id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate radius"""
        if not math.isfinite(self.radius) or self.radius <= 0:
            raise InvalidSizeError(f"Invalid ink mark size: {self.radius}")

    @classmethod
    def create(
        cls,
        position: Position,
        color: PlayerColor,
        radius: float,
        owner_id: str,
        min_size: float = DEFAULT_RULES.mark_min_size,
        max_size: float = DEFAULT_RULES.mark_max_size,
        created_at: Optional[datetime] = None,
        mark_id: Optional[str] = None,
    ) -> "InkMark":
        """Create a mark with a fresh id, rejecting radii outside [min_size, max_size]"""
        if not math.isfinite(radius) or not min_size <= radius <= max_size:
            raise InvalidSizeError(
                f"Invalid ink mark size: {radius}. Must be between {min_size} and {max_size}"
            )

        return cls(
            id=mark_id or str(uuid.uuid4()),
            position=position,
            color=color,
            radius=radius,
            owner_id=owner_id,
            created_at=created_at or datetime.now(timezone.utc),
        )

    @property
    def area(self) -> float:
        """Painted area (pi * r^2)"""
        return math.pi * self.radius * self.radius

    def with_radius(self, radius: float) -> "InkMark":
        """Same mark (same id) with a new radius"""
        return replace(self, radius=radius)

    def overlaps(self, other: "InkMark") -> bool:
        """Check if the two circles intersect"""
        return self.position.distance_to(other.position) < self.radius + other.radius

    def contains(self, position: Position) -> bool:
        """Point-in-circle test"""
        return self.position.distance_to(position) <= self.radius

    def __str__(self) -> str:
        return f"InkMark({self.color.value}, r={self.radius:.2f} at {self.position})"
