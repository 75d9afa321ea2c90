"""
Transform engine owning a twiddle-table cache.

Tables are keyed by (size, direction), so an inverse call never reuses a
forward table of the same length. The cache is guarded by a lock for
read/rebuild and bounded in size (least recently used table evicted first).
"""

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..utils.config import TransformConfig
from ..utils.logging import get_logger
from .fft import BACKENDS, SampleSequence, transform
from .twiddle import TwiddleTable, build_twiddle_table
from .validation import FORWARD, INVERSE, check_direction, validate_length

logger = get_logger(__name__)

DTYPES = ('complex128', 'clongdouble')


@dataclass(frozen=True)
class CacheInfo:
    hits: int
    misses: int
    evictions: int
    currsize: int
    maxsize: int


class TransformEngine:
    """
    FFT engine with its own twiddle cache.

    Example
    -------
    >>> engine = TransformEngine()
    >>> x = np.ones(4, dtype=complex)
    >>> engine.forward(x)      # x is now [4, 0, 0, 0]
    >>> engine.inverse(x)      # back to [1, 1, 1, 1]
    """

    def __init__(
        self,
        backend: str = 'numba',
        cache_twiddles: bool = True,
        max_cached_tables: int = 8,
        dtype: str = 'complex128'
    ):
        """
        Args:
            backend: "numba" or "numpy"
            cache_twiddles: Keep tables between calls (False rebuilds per call)
            max_cached_tables: Upper bound on cached (size, direction) tables
            dtype: Working dtype for list input and for cached tables
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend: {backend!r} (expected one of {BACKENDS})")
        if dtype not in DTYPES:
            raise ValueError(f"Unknown dtype: {dtype!r} (expected one of {DTYPES})")
        if max_cached_tables < 1:
            raise ValueError(f"max_cached_tables must be >= 1, got {max_cached_tables}")

        self.backend = backend
        self.cache_twiddles = cache_twiddles
        self.max_cached_tables = max_cached_tables
        self.dtype = np.dtype(dtype)

        self._tables: 'OrderedDict[Tuple[int, int], TwiddleTable]' = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @classmethod
    def from_config(cls, config: TransformConfig) -> 'TransformEngine':
        return cls(
            backend=config.backend,
            cache_twiddles=config.cache_twiddles,
            max_cached_tables=config.max_cached_tables,
            dtype=config.dtype,
        )

    def twiddles(self, size: int, direction: int = FORWARD) -> TwiddleTable:
        """Return the table for (size, direction), building it if needed."""
        validate_length(size)
        direction = check_direction(direction)
        key = (size, direction)

        if not self.cache_twiddles:
            return build_twiddle_table(size, direction, dtype=self.dtype)

        with self._lock:
            table = self._tables.get(key)
            if table is not None:
                self._hits += 1
                self._tables.move_to_end(key)
                return table

            self._misses += 1
            table = build_twiddle_table(size, direction, dtype=self.dtype)
            logger.debug("Built twiddle table size=%d direction=%+d", size, direction)
            self._tables[key] = table

            while len(self._tables) > self.max_cached_tables:
                old_key, _ = self._tables.popitem(last=False)
                self._evictions += 1
                logger.debug("Evicted twiddle table size=%d direction=%+d", *old_key)

            return table

    def transform(self, sequence: SampleSequence, direction: int = FORWARD) -> None:
        """Transform ``sequence`` in place; see ``physkit.transform.fft.transform``."""
        direction = check_direction(direction)
        # validated here so a bad length never reaches the cache
        validate_length(len(sequence))
        table = self.twiddles(len(sequence), direction)
        transform(sequence, direction, table=table, backend=self.backend, dtype=self.dtype)

    def forward(self, sequence: SampleSequence) -> None:
        self.transform(sequence, FORWARD)

    def inverse(self, sequence: SampleSequence) -> None:
        self.transform(sequence, INVERSE)

    def clear_cache(self) -> None:
        with self._lock:
            self._tables.clear()
            self._hits = self._misses = self._evictions = 0

    def cache_info(self) -> CacheInfo:
        with self._lock:
            return CacheInfo(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                currsize=len(self._tables),
                maxsize=self.max_cached_tables,
            )

    @property
    def cached_keys(self) -> Tuple[Tuple[int, int], ...]:
        with self._lock:
            return tuple(self._tables)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(backend={self.backend}, dtype={self.dtype}, "
                f"cache_twiddles={self.cache_twiddles}, cached={len(self._tables)})")
