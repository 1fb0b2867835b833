"""
Recursive FFT for real frames, compiled with Numba.

Cooley-Tukey radix-2 decimation in time: a frame of even length is split into
its even- and odd-indexed samples, both halves are transformed recursively and
recombined with a butterfly. When a sub-frame has odd length the recursion
stops and a direct O(n^2) DFT is used instead. For Whisper's n_fft = 400 this
gives four radix-2 levels (400 -> 200 -> 100 -> 50 -> 25) over 25-point DFTs.

All arithmetic is single precision, and the even/odd split always happens
before the combine step, so results are reproducible against reference
outputs computed the same way.

Kernels are compiled with nogil=True so that frame workers running in
separate threads execute in parallel.

Spectra are stored interleaved: [re0, im0, re1, im1, ...] as float32.
"""

import math

import numpy as np
from numba import jit

from .exceptions import InvalidDimensionError


@jit(nopython=True, cache=True, nogil=True)
def _dft_interleaved(x: np.ndarray) -> np.ndarray:
    """Direct DFT of a real frame of any length (JIT compiled)."""
    n = x.shape[0]
    out = np.empty(2 * n, dtype=np.float32)

    for k in range(n):
        re = np.float32(0.0)
        im = np.float32(0.0)
        for t in range(n):
            # k*t mod n keeps the float32 angle inside [0, 2*pi)
            angle = np.float32(2.0 * np.pi * ((k * t) % n) / n)
            re += x[t] * np.float32(math.cos(angle))
            im -= x[t] * np.float32(math.sin(angle))
        out[2 * k] = re
        out[2 * k + 1] = im

    return out


@jit(nopython=True, nogil=True)
def _fft_interleaved(x: np.ndarray) -> np.ndarray:
    """
    Recursive radix-2 FFT with a direct-DFT fallback for odd lengths.

    x must be a contiguous float32 array of length >= 1.
    """
    n = x.shape[0]

    if n == 1:
        out = np.empty(2, dtype=np.float32)
        out[0] = x[0]
        out[1] = 0.0
        return out

    if n % 2 == 1:
        return _dft_interleaved(x)

    half = n // 2
    even = np.empty(half, dtype=np.float32)
    odd = np.empty(half, dtype=np.float32)
    for i in range(half):
        even[i] = x[2 * i]
        odd[i] = x[2 * i + 1]

    even_fft = _fft_interleaved(even)
    odd_fft = _fft_interleaved(odd)

    out = np.empty(2 * n, dtype=np.float32)
    for k in range(half):
        theta = np.float32(2.0 * np.pi * k / n)
        re = np.float32(math.cos(theta))
        im = np.float32(-math.sin(theta))

        re_odd = odd_fft[2 * k]
        im_odd = odd_fft[2 * k + 1]

        out[2 * k] = even_fft[2 * k] + re * re_odd - im * im_odd
        out[2 * k + 1] = even_fft[2 * k + 1] + re * im_odd + im * re_odd
        out[2 * (k + half)] = even_fft[2 * k] - re * re_odd + im * im_odd
        out[2 * (k + half) + 1] = even_fft[2 * k + 1] - re * im_odd - im * re_odd

    return out


def _as_frame(x: np.ndarray) -> np.ndarray:
    # private, writeable float32 copy so every call hits the same compiled signature
    frame = np.array(x, dtype=np.float32)
    if frame.ndim != 1:
        raise InvalidDimensionError(f"Input must be 1D, got shape {frame.shape}")
    if frame.shape[0] == 0:
        raise InvalidDimensionError("Cannot transform an empty frame")
    return frame


def fft_interleaved(x: np.ndarray) -> np.ndarray:
    """
    FFT of a real frame as an interleaved float32 array of length 2 * len(x).
    """
    return _fft_interleaved(_as_frame(x))


def fft(x: np.ndarray) -> np.ndarray:
    """
    Compute the full (two-sided) DFT of a real frame.

    Parameters
    ----------
    x : np.ndarray
        Real 1-D input of any positive length. Power-of-two lengths use the
        radix-2 path all the way down; other lengths fall back to a direct
        DFT once an odd sub-length is reached.

    Returns
    -------
    np.ndarray
        complex64 array of length len(x)

    Examples
    --------
    >>> X = fft(np.array([1.0, 2.0, 1.0, -1.0, 1.5, 1.0, 0.5, -0.5]))
    >>> # Should match np.fft.fft(x) to float32 precision
    """
    return fft_interleaved(x).view(np.complex64)


def dft(x: np.ndarray) -> np.ndarray:
    """Direct O(n^2) DFT of a real frame, as complex64."""
    return _dft_interleaved(_as_frame(x)).view(np.complex64)


if __name__ == "__main__":
    # python -m logmel.fft
    import time

    print("=" * 70)
    print("Recursive FFT Test (Numba JIT)")
    print("=" * 70)

    _ = fft(np.random.randn(400))

    print("\n[Correctness vs numpy.fft]")
    for N in [1, 2, 64, 256, 400, 1024, 25, 101]:
        x = np.random.randn(N).astype(np.float32)
        error = np.abs(fft(x) - np.fft.fft(x)).max()
        scale = max(np.abs(np.fft.fft(x)).max(), 1.0)
        print(f"  N={N:5d}: max_rel_error={error / scale:.2e}")

    print("\n[Performance, N=400]")
    x = np.random.randn(400).astype(np.float32)
    n_iter = 1000
    start = time.time()
    for _ in range(n_iter):
        _ = fft(x)
    print(f"  {(time.time() - start) / n_iter * 1000:.4f} ms per frame")
