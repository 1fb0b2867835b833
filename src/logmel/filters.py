"""
Mel filterbank projection.

A frame spectrum is folded into a power spectrum, projected onto the mel
filterbank and log10-compressed, one spectrogram column per frame.
librosa is only used here to build filterbanks; the projection itself is
hand-written.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import librosa
from numba import jit

from .exceptions import InvalidDimensionError
from .config import SAMPLE_RATE, N_FFT, N_MELS


# Floor applied to mel energies before log10, avoids log(0) = -inf
LOG_FLOOR = 1e-10


@dataclass
class FilterBank:
    """
    Mel filterbank as a flattened row-major float32 matrix.

    Attributes:
        n_mel: Number of mel bands (rows)
        n_fft: Number of frequency bins per band (columns), 1 + fft_size // 2
        data: Flattened weights, length n_mel * n_fft
    """
    n_mel: int
    n_fft: int
    data: np.ndarray

    def __post_init__(self):
        self.data = np.ascontiguousarray(self.data, dtype=np.float32).reshape(-1)
        if self.n_mel <= 0 or self.n_fft <= 0:
            raise InvalidDimensionError(
                f"Filterbank dimensions must be positive, got {self.n_mel} x {self.n_fft}"
            )
        if self.data.shape[0] != self.n_mel * self.n_fft:
            raise InvalidDimensionError(
                f"Filterbank data has {self.data.shape[0]} weights, "
                f"expected {self.n_mel} x {self.n_fft} = {self.n_mel * self.n_fft}"
            )

    @property
    def matrix(self) -> np.ndarray:
        """(n_mel, n_fft) view of the weights."""
        return self.data.reshape(self.n_mel, self.n_fft)

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> 'FilterBank':
        matrix = np.asarray(matrix)
        if matrix.ndim != 2:
            raise InvalidDimensionError(f"Filterbank matrix must be 2D, got shape {matrix.shape}")
        return cls(n_mel=matrix.shape[0], n_fft=matrix.shape[1], data=matrix)


def mel_filterbank(
    sample_rate: int = SAMPLE_RATE,
    fft_size: int = N_FFT,
    n_mels: int = N_MELS,
    fmin: float = 0.0,
    fmax: Optional[float] = None
) -> FilterBank:
    """
    Create the Slaney-style mel filterbank used by Whisper.

    Args:
        sample_rate: Sampling rate
        fft_size: FFT window size
        n_mels: Number of mel bands
        fmin: Minimum frequency in Hz
        fmax: Maximum frequency in Hz (default: sample_rate / 2)

    Returns:
        FilterBank of shape (n_mels, 1 + fft_size // 2)
    """
    if sample_rate <= 0 or fft_size <= 0 or n_mels <= 0:
        raise InvalidDimensionError(
            f"sample_rate, fft_size and n_mels must be positive, "
            f"got {sample_rate}, {fft_size}, {n_mels}"
        )

    weights = librosa.filters.mel(
        sr=sample_rate,
        n_fft=fft_size,
        n_mels=n_mels,
        fmin=fmin,
        fmax=fmax,
        htk=False,
        norm='slaney',
        dtype=np.float32
    )
    return FilterBank.from_matrix(weights)


@jit(nopython=True, cache=True, nogil=True)
def _power_spectrum(spectrum: np.ndarray, fft_size: int) -> np.ndarray:
    """|X|^2 of an interleaved spectrum, upper half folded onto the lower half."""
    power = np.empty(fft_size, dtype=np.float32)
    for j in range(fft_size):
        re = spectrum[2 * j]
        im = spectrum[2 * j + 1]
        power[j] = re * re + im * im

    for j in range(fft_size // 2):
        power[j] += power[fft_size - j - 1]

    return power


@jit(nopython=True, cache=True, nogil=True)
def _project_column(power: np.ndarray, filters: np.ndarray, mel: np.ndarray, frame: int):
    """Write log10(filters @ power) into column `frame` of mel."""
    n_mel, n_freq = filters.shape
    for m in range(n_mel):
        total = 0.0
        for k in range(n_freq):
            total += power[k] * filters[m, k]

        if total < LOG_FLOOR:
            total = LOG_FLOOR

        mel[m, frame] = math.log10(total)


def power_spectrum(spectrum: np.ndarray, fft_size: int) -> np.ndarray:
    """
    Fold a frame spectrum into a real power spectrum.

    power[j] = re[j]^2 + im[j]^2 for j in [0, fft_size), then
    power[j] += power[fft_size - j - 1] for j in [0, fft_size // 2).
    Bins 0..fft_size // 2 are the usable ones.

    Args:
        spectrum: complex array of length fft_size, or its interleaved
            float32 form of length 2 * fft_size
        fft_size: Frame length

    Returns:
        float32 power spectrum of length fft_size
    """
    if np.iscomplexobj(spectrum):
        spectrum = np.ascontiguousarray(spectrum, dtype=np.complex64).view(np.float32)
    else:
        spectrum = np.ascontiguousarray(spectrum, dtype=np.float32)

    if spectrum.shape[0] != 2 * fft_size:
        raise InvalidDimensionError(
            f"Spectrum holds {spectrum.shape[0] // 2} bins, expected {fft_size}"
        )
    return _power_spectrum(spectrum, fft_size)


def project_frame(power: np.ndarray, filters: FilterBank) -> np.ndarray:
    """
    Project one power spectrum onto the mel filterbank.

    Returns:
        float32 column of n_mel log10 energies, floored at log10(1e-10)
    """
    power = np.ascontiguousarray(power, dtype=np.float32)
    if power.shape[0] < filters.n_fft:
        raise InvalidDimensionError(
            f"Power spectrum has {power.shape[0]} bins, filterbank needs {filters.n_fft}"
        )

    column = np.empty((filters.n_mel, 1), dtype=np.float32)
    _project_column(power, filters.matrix, column, 0)
    return column[:, 0]
