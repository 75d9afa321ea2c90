"""
Precondition checks shared by the transform functions and the engine.
"""

from ..errors import InvalidLengthError

FORWARD = 1
INVERSE = -1


def is_power_of_two(n: int) -> bool:
    """Return True for 1, 2, 4, 8, ... and False for everything else."""
    return n > 0 and n & (n - 1) == 0


def validate_length(n: int) -> int:
    """Return ``n`` unchanged, or raise InvalidLengthError."""
    if not is_power_of_two(n):
        raise InvalidLengthError(n)
    return n


def check_direction(direction: int) -> int:
    if direction not in (FORWARD, INVERSE):
        raise ValueError(f"direction must be FORWARD (+1) or INVERSE (-1), got {direction!r}")
    return int(direction)
