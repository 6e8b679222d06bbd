"""Game score value object"""

from dataclasses import dataclass

from inkarena.domain.errors import InvalidScoreError

MAX_PAINTED_AREA = 100.0


@dataclass(frozen=True, order=True)
class GameScore:
    """Painted area of the field as a percentage (0-100)"""

    painted_area: float = 0.0

    def __post_init__(self) -> None:
        """Validate painted area"""
        if not 0.0 <= self.painted_area <= MAX_PAINTED_AREA:
            raise InvalidScoreError(
                f"Invalid painted area: {self.painted_area}. Must be between 0.0 and 100.0"
            )

    @classmethod
    def capped(cls, painted_area: float) -> "GameScore":
        """Create a score clamped into the valid range"""
        return cls(max(0.0, min(MAX_PAINTED_AREA, painted_area)))

    @property
    def percentage(self) -> float:
        """Alias of painted_area"""
        return self.painted_area

    def adding(self, painted_area: float) -> "GameScore":
        """Add painted area, capped at 100%"""
        return GameScore.capped(self.painted_area + painted_area)

    def is_perfect(self) -> bool:
        """Whole field painted"""
        return self.painted_area >= MAX_PAINTED_AREA

    def __str__(self) -> str:
        return f"{self.painted_area:.1f}%"


ZERO_SCORE = GameScore(0.0)
PERFECT_SCORE = GameScore(MAX_PAINTED_AREA)
