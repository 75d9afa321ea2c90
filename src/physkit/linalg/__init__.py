"""
Dense matrix algebra and 3D vectors.
"""

from .matrix import zeros, identity, matmul, determinant, inverse, solve
from .vector import Vector3

__all__ = [
    'zeros',
    'identity',
    'matmul',
    'determinant',
    'inverse',
    'solve',
    'Vector3',
]
