"""
Transform engine: in-place radix-2 FFT with twiddle-table management.
"""

from .validation import FORWARD, INVERSE, is_power_of_two, validate_length
from .twiddle import TwiddleTable, build_twiddle_table
from .fft import transform, fft, ifft, bit_reverse_permute, dft, BACKENDS
from .engine import TransformEngine, CacheInfo

__all__ = [
    'FORWARD',
    'INVERSE',
    'is_power_of_two',
    'validate_length',
    # Twiddle tables
    'TwiddleTable',
    'build_twiddle_table',
    # Stateless functions
    'transform',
    'fft',
    'ifft',
    'bit_reverse_permute',
    'dft',
    'BACKENDS',
    # Cached engine
    'TransformEngine',
    'CacheInfo',
]
