"""Position value object"""

import math
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Position:
    """3D point in field coordinates; y is height above the ground plane"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def origin(cls) -> "Position":
        """Create the zero position"""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Position":
        """Create position from a mapping with x, y, z keys"""
        return cls(float(data["x"]), float(data["y"]), float(data["z"]))

    def to_dict(self) -> Dict[str, float]:
        """Serialize position"""
        return {"x": self.x, "y": self.y, "z": self.z}

    def __add__(self, other: "Position") -> "Position":
        return Position(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Position") -> "Position":
        return Position(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Position":
        return Position(self.x * scalar, self.y * scalar, self.z * scalar)

    @property
    def length(self) -> float:
        """Euclidean length of the position seen as a vector"""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> "Position":
        """Unit vector in the same direction (zero stays zero)"""
        length = self.length
        if length == 0:
            return Position.origin()
        return Position(self.x / length, self.y / length, self.z / length)

    def on_ground(self) -> "Position":
        """Project onto the ground plane (y = 0)"""
        return Position(self.x, 0.0, self.z)

    def distance_to(self, other: "Position") -> float:
        """3D distance to another position"""
        return (self - other).length

    def planar_distance_to(self, other: "Position") -> float:
        """Distance measured on the ground plane, ignoring height"""
        return math.hypot(self.x - other.x, self.z - other.z)

    def midpoint(self, other: "Position") -> "Position":
        """Point halfway between two positions"""
        return Position(
            (self.x + other.x) / 2,
            (self.y + other.y) / 2,
            (self.z + other.z) / 2,
        )

    def is_valid(self) -> bool:
        """Check that no coordinate is NaN or infinite"""
        return all(math.isfinite(value) for value in (self.x, self.y, self.z))

    def __str__(self) -> str:
        return f"({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"
