"""
Unit Tests for the Transform Module

Validates the in-place radix-2 FFT against scipy and against the direct DFT.

The forward direction uses exp(+2*pi*i*k*n/N), so the scipy references are
    forward(x) == N * scipy.fft.ifft(x)
    inverse(x) == scipy.fft.fft(x) / N

Run:
    pytest tests/test_transform.py -v
"""

import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np
import pytest
from scipy.fft import fft as scipy_fft, ifft as scipy_ifft

from physkit.errors import InvalidLengthError
from physkit.transform import (
    FORWARD,
    INVERSE,
    BACKENDS,
    transform,
    fft,
    ifft,
    dft,
    bit_reverse_permute,
    build_twiddle_table,
    is_power_of_two,
)


def random_complex(n, seed=0):
    rng = np.random.default_rng(seed)
    return rng.standard_normal(n) + 1j * rng.standard_normal(n)


class TestKnownPairs:
    """Closed-form transform pairs."""

    def test_impulse(self):
        for backend in BACKENDS:
            x = np.array([1, 0, 0, 0], dtype=complex)
            transform(x, FORWARD, backend=backend)
            assert np.allclose(x, [1, 1, 1, 1])

    def test_constant(self):
        c = 2.5 - 1.0j
        for backend in BACKENDS:
            x = np.full(4, c, dtype=complex)
            transform(x, FORWARD, backend=backend)
            assert np.allclose(x, [4 * c, 0, 0, 0], atol=1e-12)

    def test_length_one_is_identity(self):
        for direction in (FORWARD, INVERSE):
            x = np.array([3 - 4j])
            transform(x, direction)
            assert x[0] == 3 - 4j

    def test_single_frequency(self):
        # exp(-2*pi*i*m*n/N) lands in bin m under the +i forward convention
        N, m = 16, 3
        n = np.arange(N)
        x = np.exp(-2j * np.pi * m * n / N)
        transform(x, FORWARD)
        expected = np.zeros(N, dtype=complex)
        expected[m] = N
        assert np.allclose(x, expected, atol=1e-10)


class TestAgainstReference:
    """Compare with scipy and with the direct DFT."""

    def test_forward_matches_scipy(self):
        for backend in BACKENDS:
            for N in [2, 4, 8, 64, 256, 1024]:
                x = random_complex(N)
                X = x.copy()
                transform(X, FORWARD, backend=backend)
                error = np.abs(X - scipy_ifft(x) * N)
                assert error.max() < 1e-9, f"forward failed for N={N} ({backend})"

        print(f"\n[Forward vs scipy] All sizes passed")

    def test_inverse_matches_scipy(self):
        for backend in BACKENDS:
            for N in [2, 8, 128, 2048]:
                x = random_complex(N, seed=1)
                X = x.copy()
                transform(X, INVERSE, backend=backend)
                error = np.abs(X - scipy_fft(x) / N)
                assert error.max() < 1e-12, f"inverse failed for N={N} ({backend})"

    def test_matches_direct_dft(self):
        for N in [1, 2, 4, 8, 16, 32, 64]:
            x = random_complex(N, seed=N)
            for direction in (FORWARD, INVERSE):
                X = x.copy()
                transform(X, direction)
                assert np.allclose(X, dft(x, direction), atol=1e-10)

    def test_dft_any_length(self):
        x = random_complex(6)
        assert np.allclose(dft(x, FORWARD), scipy_ifft(x) * 6)
        with pytest.raises(ValueError):
            dft([], FORWARD)


class TestProperties:
    """Round-trip, linearity and energy conservation."""

    def test_roundtrip(self):
        for backend in BACKENDS:
            for N in [4, 32, 512, 4096]:
                x = random_complex(N, seed=2)
                y = x.copy()
                fft(y, backend=backend)
                ifft(y, backend=backend)
                error = np.abs(y - x).max()
                assert error < 1e-12 * np.log2(N) * 100, f"round-trip N={N}: {error:.2e}"

    def test_linearity(self):
        N = 256
        s1, s2 = random_complex(N, seed=3), random_complex(N, seed=4)
        a, b = 1.5 - 0.5j, -2.0 + 0.25j

        combined = a * s1 + b * s2
        transform(combined, FORWARD)
        t1, t2 = s1.copy(), s2.copy()
        transform(t1, FORWARD)
        transform(t2, FORWARD)

        assert np.allclose(combined, a * t1 + b * t2, atol=1e-9)

    def test_parseval(self):
        for N in [8, 128, 1024]:
            x = random_complex(N, seed=5)
            X = x.copy()
            transform(X, FORWARD)
            energy_time = np.sum(np.abs(x) ** 2)
            energy_freq = np.sum(np.abs(X) ** 2)
            assert np.isclose(energy_freq, N * energy_time, rtol=1e-10)

    def test_extended_precision(self):
        x = random_complex(1024, seed=6).astype(np.clongdouble)
        y = x.copy()
        transform(y, FORWARD, backend='numpy')
        transform(y, INVERSE, backend='numpy')
        assert y.dtype == np.clongdouble
        assert np.abs(y - x).max() < 1e-12

    def test_complex64_input(self):
        x = random_complex(64, seed=7).astype(np.complex64)
        X = x.copy()
        transform(X, FORWARD)
        assert X.dtype == np.complex64
        assert np.allclose(X, scipy_ifft(x.astype(complex)) * 64, atol=1e-3)


class TestValidation:
    """Preconditions are checked before the sequence is touched."""

    def test_invalid_length(self):
        for N in [0, 3, 6, 12, 1000]:
            x = random_complex(N)
            original = x.copy()
            with pytest.raises(InvalidLengthError) as exc_info:
                transform(x, FORWARD)
            assert exc_info.value.length == N
            assert np.array_equal(x, original)

    def test_invalid_length_list_untouched(self):
        x = [1.0, 2.0, 3.0]
        with pytest.raises(InvalidLengthError):
            transform(x, FORWARD)
        assert x == [1.0, 2.0, 3.0]

    def test_invalid_length_is_value_error(self):
        with pytest.raises(ValueError):
            transform([], FORWARD)

    def test_real_array_rejected(self):
        x = np.ones(8)
        with pytest.raises(TypeError):
            transform(x, FORWARD)
        assert np.array_equal(x, np.ones(8))

    def test_multidimensional_rejected(self):
        with pytest.raises(ValueError):
            transform(np.ones((4, 4), dtype=complex), FORWARD)

    def test_readonly_rejected(self):
        x = np.ones(4, dtype=complex)
        x.setflags(write=False)
        with pytest.raises(ValueError):
            transform(x, FORWARD)

    def test_bad_direction(self):
        with pytest.raises(ValueError):
            transform(np.ones(4, dtype=complex), 0)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            transform(np.ones(4, dtype=complex), FORWARD, backend='cuda')

    def test_unsupported_container(self):
        with pytest.raises(TypeError):
            transform((1, 0, 0, 0), FORWARD)

    def test_is_power_of_two(self):
        assert [n for n in range(-2, 70) if is_power_of_two(n)] == [1, 2, 4, 8, 16, 32, 64]


class TestInPlace:
    """Caller-owned sequences are mutated, never replaced."""

    def test_array_identity_preserved(self):
        x = random_complex(32)
        buffer_address = x.__array_interface__['data'][0]
        result = transform(x, FORWARD)
        assert result is None
        assert x.__array_interface__['data'][0] == buffer_address

    def test_list_input(self):
        x = [1, 0, 0, 0]
        transform(x, FORWARD)
        assert all(isinstance(v, complex) for v in x)
        assert np.allclose(x, [1, 1, 1, 1])

        transform(x, INVERSE)
        assert np.allclose(x, [1, 0, 0, 0])

    def test_non_contiguous_view(self):
        base = np.zeros(16, dtype=complex)
        base[::2] = random_complex(8)
        expected = scipy_ifft(base[::2]) * 8

        view = base[::2]
        transform(view, FORWARD)
        assert np.allclose(base[::2], expected)
        assert np.all(base[1::2] == 0)


class TestBitReversal:

    def test_permutation_order(self):
        for backend in BACKENDS:
            x = np.arange(8, dtype=complex)
            bit_reverse_permute(x, backend=backend)
            assert np.array_equal(x.real, [0, 4, 2, 6, 1, 5, 3, 7])

    def test_involution(self):
        x = random_complex(64)
        y = x.copy()
        bit_reverse_permute(y)
        bit_reverse_permute(y)
        assert np.array_equal(x, y)

    def test_backends_agree(self):
        a = np.arange(1024, dtype=complex)
        b = a.copy()
        bit_reverse_permute(a, backend='numba')
        bit_reverse_permute(b, backend='numpy')
        assert np.array_equal(a, b)


class TestTwiddleTable:

    def test_roots(self):
        N = 16
        table = build_twiddle_table(N, FORWARD)
        k = np.arange(N // 2)
        assert len(table) == N // 2
        assert np.allclose(table.roots, np.exp(2j * np.pi * k / N), atol=1e-15)

        inverse_table = build_twiddle_table(N, INVERSE)
        assert np.allclose(inverse_table.roots, np.conj(table.roots), atol=1e-15)

    def test_readonly(self):
        table = build_twiddle_table(8)
        with pytest.raises(ValueError):
            table.roots[0] = 0

    def test_size_one(self):
        table = build_twiddle_table(1)
        assert len(table) == 0

    def test_invalid_size(self):
        with pytest.raises(InvalidLengthError):
            build_twiddle_table(12)

    def test_explicit_table(self):
        table = build_twiddle_table(64, FORWARD)
        for seed in range(3):
            x = random_complex(64, seed=seed)
            X = x.copy()
            transform(X, FORWARD, table=table)
            assert np.allclose(X, scipy_ifft(x) * 64)

    def test_mismatched_table_rejected(self):
        x = np.ones(8, dtype=complex)
        with pytest.raises(ValueError):
            transform(x, FORWARD, table=build_twiddle_table(16, FORWARD))
        with pytest.raises(ValueError):
            transform(x, INVERSE, table=build_twiddle_table(8, FORWARD))
        assert np.array_equal(x, np.ones(8))
