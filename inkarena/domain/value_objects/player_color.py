"""Player color value object"""

from enum import Enum
from typing import Tuple


class PlayerColor(Enum):
    """Ink color; also identifies which player owns a mark"""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    PURPLE = "purple"
    ORANGE = "orange"

    @property
    def display_name(self) -> str:
        """Human readable name"""
        return self.value.capitalize()

    @property
    def rgb(self) -> Tuple[float, float, float]:
        """RGB components in the 0.0 - 1.0 range"""
        return _RGB_VALUES[self]


_RGB_VALUES = {
    PlayerColor.RED: (1.0, 0.0, 0.0),
    PlayerColor.BLUE: (0.0, 0.0, 1.0),
    PlayerColor.GREEN: (0.0, 1.0, 0.0),
    PlayerColor.YELLOW: (1.0, 1.0, 0.0),
    PlayerColor.PURPLE: (0.5, 0.0, 0.5),
    PlayerColor.ORANGE: (1.0, 0.5, 0.0),
}
