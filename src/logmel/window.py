from functools import lru_cache

import numpy as np

from .exceptions import InvalidDimensionError


@lru_cache(maxsize=8)
def hann_window(fft_size: int) -> np.ndarray:
    """
    Periodic Hann window used to taper each frame.

    w[n] = 0.5 * (1 - cos(2*pi*n / N)), n = 0..N-1

    This is the "DFT-even" variant (N in the denominator, not N-1). The
    coefficients are evaluated in double precision and stored as float32.
    The returned array is cached and read-only, so all workers can share it.

    Parameters
    ----------
    fft_size : int
        Window length in samples

    Returns
    -------
    np.ndarray
        float32 window of length fft_size
    """
    if fft_size <= 0:
        raise InvalidDimensionError(f"fft_size must be positive, got {fft_size}")

    n = np.arange(fft_size, dtype=np.float64)
    w = (0.5 * (1.0 - np.cos(2.0 * np.pi * n / fft_size))).astype(np.float32)
    w.flags.writeable = False
    return w
