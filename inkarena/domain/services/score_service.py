"""Coverage, ranking and winner computation"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from inkarena.domain.entities.ink_mark import InkMark
from inkarena.domain.entities.player import Player
from inkarena.domain.errors import InvalidFieldSizeError
from inkarena.domain.value_objects.game_rules import DEFAULT_RULES, GameRules
from inkarena.domain.value_objects.game_score import GameScore

WIN_BONUS_RATE = 0.10
TIME_BONUS_RATE = 0.05
EFFICIENCY_BONUS_RATE = 0.20


@dataclass(frozen=True)
class GameResult:
    """Final standing of one player"""

    player_id: str
    player_name: str
    score: GameScore
    rank: int
    mark_count: int
    area_efficiency: float
    bonus_score: Optional[GameScore] = None

    @property
    def is_winner(self) -> bool:
        """Ranked first"""
        return self.rank == 1

    @property
    def is_perfect_game(self) -> bool:
        """Whole field painted"""
        return self.score.is_perfect()


class ScoreService:
    """Pure scoring over a session's marks

    Coverage sums mark areas without subtracting overlaps between marks of
    the same owner. Overlaps are only accounted for when marks merge at
    placement time, so coverage can over-count.
    """

    def __init__(
        self,
        rules: GameRules = DEFAULT_RULES,
        min_win_margin: float = 3.0,
        tie_break_by_mark_count: bool = True,
    ):
        self.rules = rules
        self.min_win_margin = min_win_margin
        self.tie_break_by_mark_count = tie_break_by_mark_count

    @staticmethod
    def validate_field_area(field_area: float) -> None:
        """Raise InvalidFieldSizeError unless the area is finite and positive"""
        if not isinstance(field_area, (int, float)) or not math.isfinite(field_area) or field_area <= 0:
            raise InvalidFieldSizeError(f"Invalid field area: {field_area}")

    # Coverage

    def player_coverage(self, player_id: str, marks: Iterable[InkMark], field_area: float) -> float:
        """Percentage of the field painted by one player's marks"""
        self.validate_field_area(field_area)
        painted = sum(mark.area for mark in marks if mark.owner_id == player_id)
        return min(100.0, 100.0 * painted / field_area)

    def total_coverage(self, marks: Iterable[InkMark], field_area: float) -> float:
        """Percentage of the field painted by everybody"""
        self.validate_field_area(field_area)
        painted = sum(mark.area for mark in marks)
        return min(100.0, 100.0 * painted / field_area)

    def player_score(self, player_id: str, marks: Iterable[InkMark], field_area: float) -> GameScore:
        return GameScore.capped(self.player_coverage(player_id, marks, field_area))

    def score_players(
        self, players: Iterable[Player], marks: Sequence[InkMark], field_area: float
    ) -> List[Player]:
        """Players with their score recomputed from the marks"""
        return [
            player.with_score(self.player_score(player.id, marks, field_area)) for player in players
        ]

    # Outcome

    def determine_winner(
        self,
        players: Sequence[Player],
        marks: Sequence[InkMark],
        min_win_margin: Optional[float] = None,
        tie_break_by_mark_count: Optional[bool] = None,
    ) -> Optional[Player]:
        """
        Pick the winner from players' current scores.

        A lead smaller than ``min_win_margin`` points counts as a close game:
        the player with more marks wins it, and equal mark counts are a draw.
        Without the mark-count tie-break a close game goes to the strictly
        higher score, and equal scores are a draw.

        Returns:
            Winning player, or None for a draw or an empty list
        """
        margin = self.min_win_margin if min_win_margin is None else min_win_margin
        tie_break = (
            self.tie_break_by_mark_count if tie_break_by_mark_count is None else tie_break_by_mark_count
        )

        if not players:
            return None
        if len(players) == 1:
            return players[0]

        ranked = sorted(players, key=lambda player: player.score, reverse=True)
        leader, runner_up = ranked[0], ranked[1]

        gap = leader.score.painted_area - runner_up.score.painted_area
        if gap >= margin:
            return leader

        if tie_break:
            leader_marks = self.mark_count(leader.id, marks)
            runner_up_marks = self.mark_count(runner_up.id, marks)
            if leader_marks > runner_up_marks:
                return leader
            if runner_up_marks > leader_marks:
                return runner_up
            return None

        if leader.score > runner_up.score:
            return leader
        return None

    def game_results(
        self,
        players: Sequence[Player],
        marks: Sequence[InkMark],
        field_area: float,
        remaining_time: float = 0.0,
        total_time: float = 0.0,
        winner_id: Optional[str] = None,
    ) -> List[GameResult]:
        """Ranked results; tied scores share a rank (1, 1, 3, ...)"""
        self.validate_field_area(field_area)

        scored = sorted(
            self.score_players(players, marks, field_area),
            key=lambda player: player.score,
            reverse=True,
        )

        results = []
        for player in scored:
            rank = 1 + sum(1 for other in scored if other.score > player.score)
            efficiency = self.area_efficiency(player.id, marks)
            results.append(
                GameResult(
                    player_id=player.id,
                    player_name=player.name,
                    score=player.score,
                    rank=rank,
                    mark_count=self.mark_count(player.id, marks),
                    area_efficiency=efficiency,
                    bonus_score=self.apply_bonuses(
                        player.score,
                        area_efficiency=efficiency,
                        remaining_time=remaining_time,
                        total_time=total_time,
                        is_winner=winner_id is not None and player.id == winner_id,
                    ),
                )
            )

        return results

    @staticmethod
    def mark_count(player_id: str, marks: Iterable[InkMark]) -> int:
        return sum(1 for mark in marks if mark.owner_id == player_id)

    def area_efficiency(self, player_id: str, marks: Iterable[InkMark]) -> float:
        """Average mark area relative to the largest possible mark (0-1)"""
        areas = [mark.area for mark in marks if mark.owner_id == player_id]
        if not areas:
            return 0.0
        average_area = sum(areas) / len(areas)
        return min(1.0, average_area / self.rules.max_mark_area)

    # Bonuses

    @staticmethod
    def efficiency_bonus(score: GameScore, area_efficiency: float) -> GameScore:
        """Up to +20% of the score, scaled by area efficiency"""
        efficiency = max(0.0, min(1.0, area_efficiency))
        return score.adding(score.painted_area * EFFICIENCY_BONUS_RATE * efficiency)

    @staticmethod
    def time_bonus(score: GameScore, remaining_time: float, total_time: float) -> GameScore:
        """Up to +5% of the score, scaled by the fraction of time left"""
        if total_time <= 0 or remaining_time <= 0:
            return score
        time_ratio = min(1.0, remaining_time / total_time)
        return score.adding(score.painted_area * time_ratio * TIME_BONUS_RATE)

    @staticmethod
    def win_bonus(score: GameScore) -> GameScore:
        """+10% of the score"""
        return score.adding(score.painted_area * WIN_BONUS_RATE)

    def apply_bonuses(
        self,
        score: GameScore,
        area_efficiency: float,
        remaining_time: float = 0.0,
        total_time: float = 0.0,
        is_winner: bool = False,
    ) -> GameScore:
        """Apply efficiency, then time, then win bonus; never above 100%"""
        boosted = self.efficiency_bonus(score, area_efficiency)
        if remaining_time > 0:
            boosted = self.time_bonus(boosted, remaining_time, total_time)
        if is_winner:
            boosted = self.win_bonus(boosted)
        return boosted
