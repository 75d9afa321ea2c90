#!/usr/bin/env python
"""
FFT Benchmark Script.

Times the in-place transform engine against scipy.fft for a range of
power-of-two sizes and reports the maximum deviation from scipy.

Note that the forward direction here uses exp(+2*pi*i*k*n/N), which equals
N * scipy.fft.ifft(x).

Usage:
    # Default sizes, both backends
    python scripts/benchmark_fft.py

    # Custom sizes and config
    python scripts/benchmark_fft.py --sizes 256 1024 4096 --config configs/default.yaml
"""

import argparse
import json
import sys
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List

import numpy as np
from rich.console import Console
from rich.table import Table
from rich import box

# Add src to path when running from a checkout
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

from physkit.transform import TransformEngine
from physkit.utils import load_config, setup_logging

console = Console()


@dataclass
class BenchmarkResult:
    """Timing and accuracy for one (backend, size) pair."""
    backend: str
    size: int
    ours_ms: float
    scipy_ms: float
    max_error: float
    roundtrip_error: float

    @property
    def ratio(self) -> float:
        return self.ours_ms / self.scipy_ms if self.scipy_ms > 0 else float('inf')

    def to_dict(self) -> Dict:
        d = asdict(self)
        d['ratio'] = self.ratio
        return d


def benchmark_size(engine: TransformEngine, n: int, n_iter: int, rng: np.random.Generator) -> BenchmarkResult:
    from scipy.fft import ifft as scipy_ifft

    x = rng.standard_normal(n) + 1j * rng.standard_normal(n)

    # Warm up (JIT compilation, twiddle cache)
    buf = x.copy()
    engine.forward(buf)
    expected = scipy_ifft(x) * n
    max_error = float(np.abs(buf - expected).max())
    engine.inverse(buf)
    roundtrip_error = float(np.abs(buf - x).max())

    start = time.perf_counter()
    for _ in range(n_iter):
        buf[:] = x
        engine.forward(buf)
    ours_ms = (time.perf_counter() - start) / n_iter * 1000

    start = time.perf_counter()
    for _ in range(n_iter):
        _ = scipy_ifft(x)
    scipy_ms = (time.perf_counter() - start) / n_iter * 1000

    return BenchmarkResult(
        backend=engine.backend,
        size=n,
        ours_ms=ours_ms,
        scipy_ms=scipy_ms,
        max_error=max_error,
        roundtrip_error=roundtrip_error,
    )


def print_results(results: List[BenchmarkResult]):
    table = Table(title="FFT Benchmark", box=box.ROUNDED)
    table.add_column("Backend", style="cyan")
    table.add_column("N", justify="right")
    table.add_column("Ours (ms)", justify="right")
    table.add_column("Scipy (ms)", justify="right")
    table.add_column("Ratio", justify="right")
    table.add_column("Max error", justify="right")
    table.add_column("Round-trip", justify="right")

    for r in results:
        style = "green" if r.max_error < 1e-9 else "red"
        table.add_row(
            r.backend,
            str(r.size),
            f"{r.ours_ms:.4f}",
            f"{r.scipy_ms:.4f}",
            f"{r.ratio:.2f}x",
            f"[{style}]{r.max_error:.2e}[/{style}]",
            f"{r.roundtrip_error:.2e}",
        )

    console.print(table)


def main():
    parser = argparse.ArgumentParser(description='Benchmark the radix-2 FFT engine')
    parser.add_argument('--config', type=str, default=None,
                        help='YAML config (default: built-in defaults)')
    parser.add_argument('--sizes', type=int, nargs='+',
                        default=[64, 256, 1024, 4096, 16384],
                        help='Transform sizes (powers of two)')
    parser.add_argument('--backends', type=str, nargs='+', default=['numba', 'numpy'],
                        help='Backends to benchmark')
    parser.add_argument('--n-iter', type=int, default=200,
                        help='Timed iterations per size')
    parser.add_argument('--seed', type=int, default=0)
    parser.add_argument('--output', type=str, default=None,
                        help='Optional JSON file for the results')
    args = parser.parse_args()

    config = load_config(args.config)
    logger = setup_logging(log_file=config.log_file, level=config.log_level)
    logger.info(f"Benchmark config: {config.to_dict()}")

    rng = np.random.default_rng(args.seed)
    results = []
    for backend in args.backends:
        config.backend = backend
        engine = TransformEngine.from_config(config)
        for n in args.sizes:
            results.append(benchmark_size(engine, n, args.n_iter, rng))
        logger.info(f"{backend}: {engine.cache_info()}")

    print_results(results)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump([r.to_dict() for r in results], f, indent=2)
        console.print(f"[green]Saved results to {output_path}[/green]")


if __name__ == '__main__':
    main()
