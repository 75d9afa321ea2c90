"""
3D vector value type.
"""

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np


@dataclass(frozen=True)
class Vector3:
    """Immutable 3D vector; ``z`` defaults to 0 for planar use."""
    x: float
    y: float
    z: float = 0.0

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> 'Vector3':
        values = tuple(values)
        if len(values) not in (2, 3):
            raise ValueError(f"Expected 2 or 3 components, got {len(values)}")
        return cls(*values)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: 'Vector3') -> 'Vector3':
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __neg__(self) -> 'Vector3':
        return Vector3(-self.x, -self.y, -self.z)

    def __sub__(self, other: 'Vector3') -> 'Vector3':
        if not isinstance(other, Vector3):
            return NotImplemented
        return self + (-other)

    def __mul__(self, scalar: float) -> 'Vector3':
        if isinstance(scalar, Vector3):
            return NotImplemented
        return Vector3(scalar * self.x, scalar * self.y, scalar * self.z)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> 'Vector3':
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def dot(self, other: 'Vector3') -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: 'Vector3') -> 'Vector3':
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude_squared(self) -> float:
        return self.dot(self)

    def magnitude(self) -> float:
        """Euclidean norm."""
        return math.sqrt(self.magnitude_squared())

    def normalized(self) -> 'Vector3':
        mag = self.magnitude()
        if mag == 0.0:
            raise ValueError("Cannot normalize the zero vector")
        return self / mag

    def to_array(self, dtype=np.float64) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=dtype)
