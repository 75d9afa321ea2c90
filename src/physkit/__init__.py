"""
physkit - Numerical toolkit for physics and simulation code

Modules:
    - transform: in-place radix-2 FFT (Cooley-Tukey) and a caching engine
    - linalg: dense matrix algebra (Gaussian elimination) and 3D vectors
    - utils: logging and YAML configuration
"""

from .errors import PhyskitError, InvalidLengthError, SingularMatrixError
from .transform import (
    FORWARD,
    INVERSE,
    transform,
    fft,
    ifft,
    dft,
    TransformEngine,
    TwiddleTable,
    build_twiddle_table,
)
from .linalg import identity, matmul, determinant, inverse, solve, Vector3

__all__ = [
    # Errors
    'PhyskitError',
    'InvalidLengthError',
    'SingularMatrixError',
    # Transform
    'FORWARD',
    'INVERSE',
    'transform',
    'fft',
    'ifft',
    'dft',
    'TransformEngine',
    'TwiddleTable',
    'build_twiddle_table',
    # Linear algebra
    'identity',
    'matmul',
    'determinant',
    'inverse',
    'solve',
    'Vector3',
]

__version__ = '1.0.0'
