"""Tests for coverage, winner selection, ranking and bonuses"""

import math
from typing import List

import pytest

from inkarena.domain.entities.ink_mark import InkMark
from inkarena.domain.entities.player import Player
from inkarena.domain.errors import InvalidFieldSizeError
from inkarena.domain.services.score_service import ScoreService
from inkarena.domain.value_objects.game_score import GameScore
from inkarena.domain.value_objects.player_color import PlayerColor
from inkarena.domain.value_objects.position import Position

FIELD_AREA = 16.0


def marks_for(player: Player, count: int, radius: float = 0.5) -> List[InkMark]:
    return [
        InkMark.create(Position(3.0 * index, 0.0, 0.0), player.color, radius, player.id)
        for index in range(count)
    ]


@pytest.fixture
def service() -> ScoreService:
    return ScoreService()


class TestCoverage:
    def test_player_coverage(self, service: ScoreService, red_player: Player) -> None:
        marks = marks_for(red_player, 1, radius=1.0)

        assert service.player_coverage(red_player.id, marks, FIELD_AREA) == pytest.approx(
            100 * math.pi / FIELD_AREA
        )
        assert service.player_coverage("nobody", marks, FIELD_AREA) == 0.0

    def test_coverage_never_decreases_when_marks_are_added(
        self, service: ScoreService, red_player: Player, blue_player: Player
    ) -> None:
        marks: List[InkMark] = []
        previous = 0.0
        for mark in marks_for(red_player, 3) + marks_for(blue_player, 3):
            marks.append(mark)
            total = service.total_coverage(marks, FIELD_AREA)
            assert total >= previous
            previous = total

    def test_coverage_is_capped(self, service: ScoreService, red_player: Player) -> None:
        marks = marks_for(red_player, 5, radius=2.0)

        assert service.player_coverage(red_player.id, marks, FIELD_AREA) == 100.0
        assert service.player_score(red_player.id, marks, FIELD_AREA).is_perfect()

    @pytest.mark.parametrize("field_area", [0.0, -1.0, math.inf, math.nan])
    def test_invalid_field_area(self, service: ScoreService, field_area: float) -> None:
        with pytest.raises(InvalidFieldSizeError):
            service.total_coverage([], field_area)


class TestDetermineWinner:
    def test_clear_lead_wins(self, service: ScoreService, red_player: Player, blue_player: Player) -> None:
        players = [red_player.with_score(GameScore(10.0)), blue_player.with_score(GameScore(40.0))]

        assert service.determine_winner(players, []) == players[1]

    def test_full_tie_is_a_draw(self, service: ScoreService, red_player: Player, blue_player: Player) -> None:
        players = [red_player.with_score(GameScore(20.0)), blue_player.with_score(GameScore(20.0))]
        marks = marks_for(red_player, 2) + marks_for(blue_player, 2)

        assert service.determine_winner(players, marks) is None

    def test_close_game_goes_to_more_marks(
        self, service: ScoreService, red_player: Player, blue_player: Player
    ) -> None:
        players = [red_player.with_score(GameScore(12.0)), blue_player.with_score(GameScore(10.0))]
        marks = marks_for(red_player, 1) + marks_for(blue_player, 3)

        assert service.determine_winner(players, marks) == players[1]

    def test_close_game_without_tie_break(
        self, red_player: Player, blue_player: Player
    ) -> None:
        service = ScoreService(tie_break_by_mark_count=False)
        leading = [red_player.with_score(GameScore(12.0)), blue_player.with_score(GameScore(10.0))]
        level = [red_player.with_score(GameScore(10.0)), blue_player.with_score(GameScore(10.0))]

        assert service.determine_winner(leading, []) == leading[0]
        assert service.determine_winner(level, []) is None

    def test_margin_override(self, service: ScoreService, red_player: Player, blue_player: Player) -> None:
        players = [red_player.with_score(GameScore(12.0)), blue_player.with_score(GameScore(10.0))]

        assert service.determine_winner(players, [], min_win_margin=1.0) == players[0]

    def test_degenerate_player_lists(self, service: ScoreService, red_player: Player) -> None:
        assert service.determine_winner([], []) is None
        assert service.determine_winner([red_player], []) == red_player


class TestGameResults:
    def test_ranked_results(self, service: ScoreService, red_player: Player, blue_player: Player) -> None:
        marks = marks_for(red_player, 2, radius=1.0) + marks_for(blue_player, 1, radius=0.5)

        results = service.game_results([blue_player, red_player], marks, FIELD_AREA)

        assert [result.player_id for result in results] == [red_player.id, blue_player.id]
        assert [result.rank for result in results] == [1, 2]
        assert results[0].is_winner
        assert results[0].mark_count == 2
        assert results[0].area_efficiency == pytest.approx(0.25)

    def test_tied_scores_share_rank(self, service: ScoreService, red_player: Player, blue_player: Player) -> None:
        marks = marks_for(red_player, 1) + marks_for(blue_player, 1)

        results = service.game_results([red_player, blue_player], marks, FIELD_AREA)

        assert [result.rank for result in results] == [1, 1]

    def test_bonus_score_does_not_change_rank(
        self, service: ScoreService, red_player: Player, blue_player: Player
    ) -> None:
        marks = marks_for(red_player, 1, radius=1.0) + marks_for(blue_player, 1, radius=1.0)

        results = service.game_results(
            [red_player, blue_player],
            marks,
            FIELD_AREA,
            remaining_time=90,
            total_time=180,
            winner_id=blue_player.id,
        )

        by_player = {result.player_id: result for result in results}
        assert by_player[blue_player.id].bonus_score > by_player[red_player.id].bonus_score
        assert by_player[blue_player.id].rank == by_player[red_player.id].rank == 1


class TestBonuses:
    def test_bonuses_apply_in_order(self, service: ScoreService) -> None:
        boosted = service.apply_bonuses(
            GameScore(50.0), area_efficiency=1.0, remaining_time=90, total_time=180, is_winner=True
        )

        # 50 -> 60 (efficiency) -> 61.5 (time) -> 67.65 (win)
        assert boosted.painted_area == pytest.approx(67.65)

    def test_bonuses_are_capped(self, service: ScoreService) -> None:
        boosted = service.apply_bonuses(GameScore(95.0), area_efficiency=1.0, is_winner=True)
        assert boosted.is_perfect()

    def test_no_time_bonus_without_time_left(self, service: ScoreService) -> None:
        assert service.time_bonus(GameScore(50.0), 0, 180) == GameScore(50.0)
        assert service.time_bonus(GameScore(50.0), 10, 0) == GameScore(50.0)
