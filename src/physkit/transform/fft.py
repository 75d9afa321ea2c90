"""
In-place iterative radix-2 FFT

This module implements the decimation-in-time Cooley-Tukey FFT on
power-of-two lengths, mutating the caller's sequence in place.

Steps:
1. Bit-reversal permutation (incremental bit-flip walk, no extra buffer)
2. Butterfly stages of width 2, 4, ..., N using one twiddle table
3. 1/N scaling for the inverse direction

Sign convention: the forward direction uses exp(+2*pi*i*k*n/N) and the
inverse uses exp(-2*pi*i*k*n/N) followed by division by N.

Two backends are available:
- "numba": JIT-compiled loops over complex128 (default)
- "numpy": vectorised stages, works for any complex dtype (e.g. clongdouble)
"""

from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np
from numba import jit

from ..utils.logging import get_logger
from .twiddle import TwiddleTable, build_twiddle_table
from .validation import FORWARD, INVERSE, check_direction, validate_length

logger = get_logger(__name__)

BACKENDS = ('numba', 'numpy')
DEFAULT_BACKEND = 'numba'

SampleSequence = Union[np.ndarray, List[complex]]


# ============== Numba kernels (complex128) ==============

@jit(nopython=True, cache=True)
def _bit_reverse_permute_jit(a: np.ndarray) -> None:
    """Swap a[i] with a[rev(i)] using the running reversed index j."""
    n = a.shape[0]
    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j >= bit:
            j -= bit
            bit >>= 1
        j += bit
        if i < j:
            tmp = a[i]
            a[i] = a[j]
            a[j] = tmp


@jit(nopython=True, cache=True)
def _butterfly_stages_jit(a: np.ndarray, roots: np.ndarray) -> None:
    n = a.shape[0]
    length = 2
    while length <= n:
        half = length // 2
        layer = n // length
        for j in range(0, n, length):
            for k in range(half):
                u = a[j + k]
                v = a[j + k + half] * roots[layer * k]
                a[j + k] = u + v
                a[j + k + half] = u - v
        length <<= 1


# ============== NumPy path (any complex dtype) ==============

def _bit_reverse_indices(n: int) -> np.ndarray:
    """rev[i] = i with its log2(n) low bits reversed."""
    n_bits = n.bit_length() - 1
    idx = np.arange(n, dtype=np.intp)
    rev = np.zeros(n, dtype=np.intp)
    for b in range(n_bits):
        rev |= ((idx >> b) & 1) << (n_bits - 1 - b)
    return rev


def _bit_reverse_permute_numpy(a: np.ndarray) -> None:
    # rev is an involution, so gathering through it equals the pairwise swaps
    a[:] = a[_bit_reverse_indices(a.shape[0])]


def _butterfly_stages_numpy(a: np.ndarray, roots: np.ndarray) -> None:
    """
    Same butterflies as the JIT kernel, one stage at a time.

    ``a`` must be C-contiguous so the (blocks, width) reshape is a view.
    """
    n = a.shape[0]
    length = 2
    while length <= n:
        half = length // 2
        layer = n // length
        # roots[layer * k] for k in [0, half)
        w = roots[::layer][:half]
        blocks = a.reshape(-1, length)
        u = blocks[:, :half].copy()
        v = blocks[:, half:] * w
        blocks[:, :half] = u + v
        blocks[:, half:] = u - v
        length <<= 1


# ============== Buffer handling ==============

def _resolve_backend(backend: Optional[str]) -> str:
    if backend is None:
        return DEFAULT_BACKEND
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend: {backend!r} (expected one of {BACKENDS})")
    return backend


def _work_buffer(
    sequence: SampleSequence,
    dtype: Optional[Union[str, np.dtype]] = None
) -> Tuple[np.ndarray, Optional[Callable[[np.ndarray], None]]]:
    """
    Validate ``sequence`` and return (buffer, write_back).

    The buffer is the caller's array itself whenever possible; otherwise it
    is a contiguous copy and ``write_back`` copies the result into the
    caller's sequence. Nothing is mutated here, so a rejected call leaves
    the input untouched.
    """
    if isinstance(sequence, np.ndarray):
        if sequence.ndim != 1:
            raise ValueError(f"Input must be 1D, got shape {sequence.shape}")
        validate_length(sequence.shape[0])
        if not np.iscomplexobj(sequence):
            raise TypeError(
                f"In-place transform needs a complex array, got dtype {sequence.dtype}"
            )
        if not sequence.flags.writeable:
            raise ValueError("Input array is read-only")
        if sequence.flags.c_contiguous:
            return sequence, None

        def write_back(buf: np.ndarray) -> None:
            sequence[...] = buf

        return np.ascontiguousarray(sequence), write_back

    if isinstance(sequence, list):
        validate_length(len(sequence))
        buf = np.array(sequence, dtype=np.complex128 if dtype is None else np.dtype(dtype))
        if buf.ndim != 1:
            raise ValueError(f"Input must be a flat list of numbers, got shape {buf.shape}")
        if not np.iscomplexobj(buf):
            raise TypeError(f"Working dtype must be complex, got {buf.dtype}")

        def write_back(buf: np.ndarray) -> None:
            sequence[:] = [complex(z) for z in buf]

        return buf, write_back

    raise TypeError(
        f"Expected a complex numpy array or a list, got {type(sequence).__name__}"
    )


def _run(a: np.ndarray, table: TwiddleTable, backend: str) -> None:
    roots = table.roots.astype(a.dtype, copy=False)

    if backend == 'numba' and a.dtype == np.complex128:
        _bit_reverse_permute_jit(a)
        _butterfly_stages_jit(a, np.ascontiguousarray(roots))
    else:
        if backend == 'numba':
            logger.debug("dtype %s not handled by numba kernels, using numpy path", a.dtype)
        _bit_reverse_permute_numpy(a)
        _butterfly_stages_numpy(a, roots)

    if table.direction == INVERSE:
        a /= a.shape[0]


# ============== Public API ==============

def transform(
    sequence: SampleSequence,
    direction: int = FORWARD,
    table: Optional[TwiddleTable] = None,
    backend: Optional[str] = None,
    dtype: Optional[Union[str, np.dtype]] = None
) -> None:
    """
    Transform ``sequence`` in place (forward DFT or its inverse).

    Parameters
    ----------
    sequence : np.ndarray or list
        1-D complex array, or a list of numbers, whose length is a power of
        two. Arrays are mutated directly; list items are replaced with
        ``complex`` values.
    direction : int
        FORWARD (+1) or INVERSE (-1). The inverse divides by N.
    table : TwiddleTable, optional
        Precomputed table for (len(sequence), direction). When omitted a
        fresh table is built for this call only.
    backend : str, optional
        "numba" (default) or "numpy".
    dtype : str or np.dtype, optional
        Working dtype for list input (default complex128). Ignored for arrays.

    Raises
    ------
    InvalidLengthError
        If the length is zero or not a power of two. Raised before any
        element is touched.

    Examples
    --------
    >>> import numpy as np
    >>> x = np.array([1, 0, 0, 0], dtype=complex)
    >>> transform(x)
    >>> x
    array([1.+0.j, 1.+0.j, 1.+0.j, 1.+0.j])
    """
    direction = check_direction(direction)
    backend = _resolve_backend(backend)
    buf, write_back = _work_buffer(sequence, dtype)
    n = buf.shape[0]

    if table is None:
        table = build_twiddle_table(n, direction, dtype=buf.dtype)
    elif not table.matches(n, direction):
        raise ValueError(
            f"Twiddle table is for (size={table.size}, direction={table.direction:+d}), "
            f"call needs (size={n}, direction={direction:+d})"
        )

    _run(buf, table, backend)

    if write_back is not None:
        write_back(buf)


def fft(sequence: SampleSequence, **kwargs) -> None:
    """Forward transform in place."""
    transform(sequence, FORWARD, **kwargs)


def ifft(sequence: SampleSequence, **kwargs) -> None:
    """Inverse transform in place (includes the 1/N scaling)."""
    transform(sequence, INVERSE, **kwargs)


def bit_reverse_permute(sequence: SampleSequence, backend: Optional[str] = None) -> None:
    """Apply only the bit-reversal permutation, in place."""
    backend = _resolve_backend(backend)
    buf, write_back = _work_buffer(sequence)
    if backend == 'numba' and buf.dtype == np.complex128:
        _bit_reverse_permute_jit(buf)
    else:
        _bit_reverse_permute_numpy(buf)
    if write_back is not None:
        write_back(buf)


def dft(sequence: Sequence[complex], direction: int = FORWARD) -> np.ndarray:
    """
    Direct O(N^2) DFT with the same sign and scaling as ``transform``.

    Works for any length N >= 1 and returns a new array; used as the
    reference the fast path is checked against.
    """
    direction = check_direction(direction)
    x = np.asarray(sequence, dtype=np.complex128)
    if x.ndim != 1 or x.shape[0] == 0:
        raise ValueError(f"Input must be a non-empty 1D sequence, got shape {x.shape}")

    n = x.shape[0]
    k = np.arange(n)
    W = np.exp(direction * 2j * np.pi * np.outer(k, k) / n)
    X = W @ x
    if direction == INVERSE:
        X /= n
    return X
