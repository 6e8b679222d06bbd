"""Collision and overlap detection between players and ink marks

All queries are pure: they read players and marks and return results that
the caller applies to the session.
"""

import math
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Iterable, List, Optional, Tuple, Union

from inkarena.domain.entities.ink_mark import InkMark
from inkarena.domain.entities.player import Player
from inkarena.domain.value_objects.game_rules import DEFAULT_RULES, GameRules
from inkarena.domain.value_objects.position import Position


class EffectKind(Enum):
    """Tag of a collision effect"""

    NONE = "none"
    STUNNED = "stunned"


@dataclass(frozen=True)
class NoEffect:
    """Player is not affected"""

    kind: ClassVar[EffectKind] = EffectKind.NONE

    @property
    def is_stunned(self) -> bool:
        return False

    @property
    def stun_duration(self) -> float:
        return 0.0

    @property
    def speed_reduction(self) -> float:
        return 0.0


@dataclass(frozen=True)
class Stunned:
    """Player is incapacitated for ``duration`` seconds, then slowed"""

    duration: float
    speed_reduction: float

    kind: ClassVar[EffectKind] = EffectKind.STUNNED

    @property
    def is_stunned(self) -> bool:
        return True

    @property
    def stun_duration(self) -> float:
        return self.duration


CollisionEffect = Union[NoEffect, Stunned]

NO_EFFECT = NoEffect()


@dataclass(frozen=True)
class CollisionResult:
    """Outcome of a player/mark proximity check"""

    has_collision: bool
    distance: float
    collision_point: Optional[Position] = None


NO_COLLISION = CollisionResult(has_collision=False, distance=math.inf)


@dataclass(frozen=True)
class OverlapResult:
    """Outcome of a mark/mark intersection check

    ``merged_size`` is only set for marks of the same color.
    """

    has_overlap: bool
    overlap_area: float
    merged_size: Optional[float] = None


NO_OVERLAP = OverlapResult(has_overlap=False, overlap_area=0.0)


@dataclass(frozen=True)
class PlacementResolution:
    """Changes to apply to the mark list when a new mark lands"""

    placed_mark: InkMark
    merged: bool
    removed_mark_ids: Tuple[str, ...]
    reduced_marks: Tuple[InkMark, ...]


def circle_intersection_area(distance: float, radius1: float, radius2: float) -> float:
    """Area shared by two circles whose centres are ``distance`` apart"""
    if distance >= radius1 + radius2:
        return 0.0

    # One circle completely inside the other
    if distance <= abs(radius1 - radius2):
        smaller = min(radius1, radius2)
        return math.pi * smaller * smaller

    r1_sq = radius1 * radius1
    r2_sq = radius2 * radius2
    d_sq = distance * distance

    # Clamp against rounding drift just outside acos' domain
    cos1 = max(-1.0, min(1.0, (d_sq + r1_sq - r2_sq) / (2 * distance * radius1)))
    cos2 = max(-1.0, min(1.0, (d_sq + r2_sq - r1_sq) / (2 * distance * radius2)))

    part1 = r1_sq * math.acos(cos1)
    part2 = r2_sq * math.acos(cos2)
    part3 = 0.5 * math.sqrt(
        max(
            0.0,
            (-distance + radius1 + radius2)
            * (distance + radius1 - radius2)
            * (distance - radius1 + radius2)
            * (distance + radius1 + radius2),
        )
    )

    return part1 + part2 - part3


class CollisionService:
    """Geometric queries over a session's players and marks"""

    def __init__(self, rules: GameRules = DEFAULT_RULES):
        self.rules = rules

    # Player / mark

    def player_mark_collision(self, player: Player, mark: InkMark) -> CollisionResult:
        """Check if an active player stands within reach of someone else's mark"""
        # Players never collide with their own ink
        if mark.owner_id == player.id:
            return NO_COLLISION

        if not player.is_active:
            return NO_COLLISION

        distance = player.position.planar_distance_to(mark.position)
        has_collision = distance < mark.radius + self.rules.player_collision_radius

        collision_point = None
        if has_collision:
            direction = (player.position - mark.position).on_ground().normalized()
            collision_point = mark.position + direction * mark.radius

        return CollisionResult(
            has_collision=has_collision,
            distance=distance,
            collision_point=collision_point,
        )

    def player_mark_collisions(self, player: Player, marks: Iterable[InkMark]) -> List[InkMark]:
        """Marks the player currently collides with"""
        return [mark for mark in marks if self.player_mark_collision(player, mark).has_collision]

    def collision_effect(self, player: Player, mark: InkMark) -> CollisionEffect:
        """Effect of the mark on the player; depends on mark size only"""
        if not self.player_mark_collision(player, mark).has_collision:
            return NO_EFFECT

        return Stunned(
            duration=self.stun_duration(mark),
            speed_reduction=self.speed_reduction(mark),
        )

    def stun_duration(self, mark: InkMark) -> float:
        """Larger marks stun longer: 1.5s to 3.0s with the default rules"""
        size_factor = mark.radius / self.rules.mark_max_size
        return self.rules.base_stun_duration * (0.5 + 0.5 * size_factor)

    def speed_reduction(self, mark: InkMark) -> float:
        """Larger marks slow more: 50% to 80%"""
        size_factor = mark.radius / self.rules.mark_max_size
        return 0.5 + 0.3 * size_factor

    # Mark / mark

    def mark_overlap(self, first: InkMark, second: InkMark) -> OverlapResult:
        """Intersection of two marks"""
        if first.id == second.id:
            return NO_OVERLAP

        distance = first.position.distance_to(second.position)
        if distance >= first.radius + second.radius:
            return NO_OVERLAP

        overlap_area = circle_intersection_area(distance, first.radius, second.radius)

        merged_size = None
        if first.color == second.color:
            merged_size = self._merged_radius(first, second, overlap_area)

        return OverlapResult(
            has_overlap=True,
            overlap_area=overlap_area,
            merged_size=merged_size,
        )

    def find_overlaps(
        self, target: InkMark, marks: Iterable[InkMark]
    ) -> List[Tuple[InkMark, OverlapResult]]:
        """All marks intersecting ``target``"""
        overlaps = []
        for mark in marks:
            result = self.mark_overlap(target, mark)
            if result.has_overlap:
                overlaps.append((mark, result))
        return overlaps

    def find_marks_containing(self, position: Position, marks: Iterable[InkMark]) -> List[InkMark]:
        """Hit-test: marks whose circle contains the position"""
        return [mark for mark in marks if mark.contains(position)]

    # Placement

    def resolve_placement(self, new_mark: InkMark, marks: Iterable[InkMark]) -> PlacementResolution:
        """Merge with same-color overlaps and shrink different-color ones

        Same-color marks fold one by one into a single fresh mark placed at
        the midpoint and owned by the new mark's owner. Different-color marks
        lose 20% of their radius unless that would take them under the
        minimum size. The new mark itself is never shrunk.
        """
        placed = new_mark
        merged = False
        removed: List[str] = []
        reduced: Dict[str, InkMark] = {}

        for existing, result in self.find_overlaps(new_mark, marks):
            if existing.color == new_mark.color:
                if placed is new_mark and result.merged_size is not None:
                    merged_size = result.merged_size
                else:
                    overlap = self.mark_overlap(placed, existing)
                    merged_size = self._merged_radius(placed, existing, overlap.overlap_area)

                placed = InkMark(
                    id=str(uuid.uuid4()),
                    position=placed.position.midpoint(existing.position),
                    color=new_mark.color,
                    radius=min(merged_size, self.rules.mark_max_size),
                    owner_id=new_mark.owner_id,
                    created_at=new_mark.created_at,
                )
                removed.append(existing.id)
                merged = True
            else:
                reduced_radius = existing.radius * self.rules.conflict_reduction_factor
                if reduced_radius >= self.rules.mark_min_size:
                    reduced[existing.id] = existing.with_radius(reduced_radius)

        return PlacementResolution(
            placed_mark=placed,
            merged=merged,
            removed_mark_ids=tuple(removed),
            reduced_marks=tuple(reduced.values()),
        )

    @staticmethod
    def _merged_radius(first: InkMark, second: InkMark, overlap_area: float) -> float:
        """Radius conserving the union area of two marks"""
        total_area = first.area + second.area - overlap_area
        return math.sqrt(total_area / math.pi)
