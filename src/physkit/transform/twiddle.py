"""
Twiddle-factor tables for the radix-2 FFT.

A table for length N holds the N/2 roots ``exp(i * theta * k)`` with
``theta = direction * 2 * pi / N``. Every butterfly stage at that length
indexes into the same table with a stride of ``N / stage_width``, so one
table serves the whole transform.

Roots are evaluated in ``numpy.longdouble`` and only then cast to the
working dtype, which keeps the table accurate to the last bit of complex128.
"""

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .validation import FORWARD, check_direction, validate_length

# pi to the precision of longdouble (np.pi is only a double)
_PI = np.arccos(np.longdouble(-1.0))


@dataclass(frozen=True, eq=False)
class TwiddleTable:
    """Immutable table of roots of unity for one (size, direction) pair."""
    size: int
    direction: int
    roots: np.ndarray

    @property
    def key(self) -> Tuple[int, int]:
        return self.size, self.direction

    def matches(self, size: int, direction: int) -> bool:
        return self.size == size and self.direction == direction

    def __len__(self) -> int:
        return len(self.roots)

    def __repr__(self) -> str:
        return (f"TwiddleTable(size={self.size}, direction={self.direction:+d}, "
                f"dtype={self.roots.dtype})")


def build_twiddle_table(
    size: int,
    direction: int = FORWARD,
    dtype: Union[str, np.dtype] = np.complex128
) -> TwiddleTable:
    """
    Build the twiddle table for a transform of length ``size``.

    Parameters
    ----------
    size : int
        Transform length, must be a power of two.
    direction : int
        FORWARD (+1) or INVERSE (-1); selects the sign of theta.
    dtype : str or np.dtype
        Complex dtype of the returned roots.

    Returns
    -------
    TwiddleTable
        Table with ``size // 2`` read-only roots.
    """
    validate_length(size)
    direction = check_direction(direction)

    half = size // 2
    theta = np.longdouble(direction) * 2 * _PI / np.longdouble(size)
    angles = theta * np.arange(half, dtype=np.longdouble)

    roots = np.empty(half, dtype=np.clongdouble)
    roots.real = np.cos(angles)
    roots.imag = np.sin(angles)
    roots = roots.astype(np.dtype(dtype))
    roots.setflags(write=False)

    return TwiddleTable(size=size, direction=direction, roots=roots)
