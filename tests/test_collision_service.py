"""Tests for player/mark collisions and mark/mark overlap resolution"""

import math
from datetime import datetime, timezone

import pytest

from inkarena.domain.entities.ink_mark import InkMark
from inkarena.domain.entities.player import Player
from inkarena.domain.services.collision_service import (
    NO_EFFECT,
    CollisionService,
    EffectKind,
    Stunned,
    circle_intersection_area,
)
from inkarena.domain.value_objects.game_rules import GameRules
from inkarena.domain.value_objects.player_color import PlayerColor
from inkarena.domain.value_objects.position import Position

START = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_mark(
    x: float,
    radius: float,
    color: PlayerColor = PlayerColor.RED,
    owner_id: str = "red-owner",
    z: float = 0.0,
) -> InkMark:
    return InkMark.create(Position(x, 0.0, z), color, radius, owner_id, created_at=START)


@pytest.fixture
def service() -> CollisionService:
    return CollisionService()


class TestPlayerMarkCollision:
    def test_player_near_enemy_mark_is_stunned(self, service: CollisionService) -> None:
        """Mark of size 1.0 at the origin reaches a player 1.2 away (1.2 < 1.0 + 0.5)"""
        mark = make_mark(0.0, 1.0)
        player = Player.create("Bob", PlayerColor.BLUE, position=Position(1.2, 0.0, 0.0))

        collision = service.player_mark_collision(player, mark)
        effect = service.collision_effect(player, mark)

        assert collision.has_collision
        assert collision.distance == pytest.approx(1.2)
        assert collision.collision_point == Position(1.0, 0.0, 0.0)
        assert isinstance(effect, Stunned)
        assert effect.kind == EffectKind.STUNNED
        assert 1.5 <= effect.duration <= 3.0
        assert 0.5 <= effect.speed_reduction <= 0.8
        assert effect.duration == pytest.approx(2.25)
        assert effect.speed_reduction == pytest.approx(0.65)

    def test_player_out_of_reach(self, service: CollisionService) -> None:
        player = Player.create("Bob", PlayerColor.BLUE, position=Position(1.5, 0.0, 0.0))

        assert service.collision_effect(player, make_mark(0.0, 1.0)) is NO_EFFECT

    def test_height_is_ignored(self, service: CollisionService) -> None:
        player = Player.create("Bob", PlayerColor.BLUE, position=Position(1.2, 3.0, 0.0))

        assert service.player_mark_collision(player, make_mark(0.0, 1.0)).has_collision

    def test_own_ink_never_collides(self, service: CollisionService) -> None:
        player = Player.create("Alice", PlayerColor.RED)
        mark = make_mark(0.0, 1.0, owner_id=player.id)

        assert not service.player_mark_collision(player, mark).has_collision
        assert service.collision_effect(player, mark).kind == EffectKind.NONE

    def test_inactive_player_never_collides(self, service: CollisionService) -> None:
        player = Player.create("Bob", PlayerColor.BLUE).deactivate()

        assert not service.player_mark_collision(player, make_mark(0.0, 1.0)).has_collision

    @pytest.mark.parametrize("radius", [0.1, 0.7, 2.0])
    def test_effect_ranges(self, service: CollisionService, radius: float) -> None:
        mark = make_mark(0.0, radius)

        assert 1.5 <= service.stun_duration(mark) <= 3.0
        assert 0.5 <= service.speed_reduction(mark) <= 0.8

    def test_collisions_across_marks(self, service: CollisionService) -> None:
        player = Player.create("Bob", PlayerColor.BLUE)
        marks = [make_mark(0.3, 0.5), make_mark(4.0, 0.5)]

        assert service.player_mark_collisions(player, marks) == [marks[0]]


class TestMarkOverlap:
    @pytest.mark.parametrize(
        "distance, r1, r2",
        [(0.5, 1.0, 1.0), (1.2, 0.5, 1.0), (0.1, 2.0, 0.3), (2.9, 1.5, 1.5)],
    )
    def test_overlap_is_symmetric_and_bounded(self, distance: float, r1: float, r2: float) -> None:
        forward = circle_intersection_area(distance, r1, r2)
        backward = circle_intersection_area(distance, r2, r1)

        assert forward == pytest.approx(backward)
        assert 0.0 <= forward <= math.pi * min(r1, r2) ** 2 + 1e-9

    def test_contained_circle(self) -> None:
        assert circle_intersection_area(0.2, 2.0, 0.5) == pytest.approx(math.pi * 0.25)

    def test_disjoint_circles(self) -> None:
        assert circle_intersection_area(3.0, 1.0, 1.0) == 0.0

    def test_same_color_overlap_reports_merged_size(self, service: CollisionService) -> None:
        result = service.mark_overlap(make_mark(0.0, 1.0), make_mark(1.0, 1.0))

        assert result.has_overlap
        assert result.overlap_area > 0
        union = 2 * math.pi - result.overlap_area
        assert result.merged_size == pytest.approx(math.sqrt(union / math.pi))

    def test_different_color_overlap_has_no_merged_size(self, service: CollisionService) -> None:
        result = service.mark_overlap(
            make_mark(0.0, 1.0), make_mark(1.0, 1.0, PlayerColor.BLUE, "blue-owner")
        )

        assert result.has_overlap
        assert result.merged_size is None

    def test_mark_never_overlaps_itself(self, service: CollisionService) -> None:
        mark = make_mark(0.0, 1.0)
        assert not service.mark_overlap(mark, mark).has_overlap

    def test_marks_containing_position(self, service: CollisionService) -> None:
        marks = [make_mark(0.0, 1.0), make_mark(5.0, 1.0)]
        assert service.find_marks_containing(Position(0.5, 0.0, 0.0), marks) == [marks[0]]


class TestPlacementResolution:
    def test_no_overlap_places_mark_as_is(self, service: CollisionService) -> None:
        new_mark = make_mark(0.0, 0.5)
        resolution = service.resolve_placement(new_mark, [make_mark(5.0, 0.5)])

        assert resolution.placed_mark is new_mark
        assert not resolution.merged
        assert resolution.removed_mark_ids == ()
        assert resolution.reduced_marks == ()

    def test_just_touching_marks_merge_to_double_area(self, service: CollisionService) -> None:
        existing = make_mark(0.0, 0.5)
        new_mark = make_mark(0.999, 0.5)

        resolution = service.resolve_placement(new_mark, [existing])

        assert resolution.merged
        assert resolution.removed_mark_ids == (existing.id,)
        assert resolution.placed_mark.area == pytest.approx(2 * math.pi * 0.25, rel=1e-3)
        assert resolution.placed_mark.position == Position(0.4995, 0.0, 0.0)
        assert resolution.placed_mark.id not in (existing.id, new_mark.id)
        assert resolution.placed_mark.owner_id == new_mark.owner_id

    def test_merged_radius_is_capped(self, service: CollisionService) -> None:
        resolution = service.resolve_placement(make_mark(0.0, 2.0), [make_mark(0.5, 2.0)])

        assert resolution.placed_mark.radius == 2.0

    def test_successive_merges_fold_into_one_mark(self, service: CollisionService) -> None:
        left = make_mark(-0.8, 0.5)
        right = make_mark(0.8, 0.5)

        resolution = service.resolve_placement(make_mark(0.0, 0.5), [left, right])

        assert resolution.merged
        assert set(resolution.removed_mark_ids) == {left.id, right.id}
        assert resolution.placed_mark.radius > 0.5

    def test_conflict_shrinks_existing_mark(self, service: CollisionService) -> None:
        enemy = make_mark(0.5, 1.0, PlayerColor.BLUE, "blue-owner")
        new_mark = make_mark(0.0, 0.5)

        resolution = service.resolve_placement(new_mark, [enemy])

        assert resolution.placed_mark is new_mark
        assert not resolution.merged
        assert len(resolution.reduced_marks) == 1
        assert resolution.reduced_marks[0].id == enemy.id
        assert resolution.reduced_marks[0].radius == pytest.approx(0.8)

    def test_conflict_below_minimum_leaves_mark_unchanged(self, service: CollisionService) -> None:
        tiny = make_mark(0.1, 0.12, PlayerColor.BLUE, "blue-owner")

        resolution = service.resolve_placement(make_mark(0.0, 0.5), [tiny])

        assert resolution.reduced_marks == ()
        assert resolution.removed_mark_ids == ()

    def test_custom_reduction_factor(self) -> None:
        service = CollisionService(GameRules(conflict_reduction_factor=0.5))
        enemy = make_mark(0.5, 1.0, PlayerColor.BLUE, "blue-owner")

        resolution = service.resolve_placement(make_mark(0.0, 0.5), [enemy])

        assert resolution.reduced_marks[0].radius == pytest.approx(0.5)
