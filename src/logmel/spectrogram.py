"""
Log-mel spectrogram entry points.

log_mel_spectrogram() is the blocking core call: validate, fill the matrix in
parallel, join, normalize. whisper_log_mel() wraps it with the Whisper
defaults (30 s chunk padding, 80-band filterbank).
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .audio import pad_or_trim
from .config import MelConfig
from .exceptions import InvalidDimensionError
from .filters import FilterBank, mel_filterbank
from .normalize import normalize_log_mel
from .scheduler import fill_log_mel
from .window import hann_window

logger = logging.getLogger(__name__)


@dataclass
class MelSpectrogram:
    """
    Normalized log-mel matrix, flattened row-major (mel band varies slowest).

    Attributes:
        n_mel: Number of mel bands (rows)
        n_len: Number of frames (columns)
        data: float32 values, length n_mel * n_len
        sample_rate: Sample rate of the source audio (informational)
    """
    n_mel: int
    n_len: int
    data: np.ndarray
    sample_rate: Optional[int] = None

    @property
    def matrix(self) -> np.ndarray:
        """(n_mel, n_len) view of data."""
        return self.data.reshape(self.n_mel, self.n_len)

    @property
    def shape(self):
        return (self.n_mel, self.n_len)


def _validate(
    samples: np.ndarray,
    n_samples: int,
    fft_size: int,
    hop_length: int,
    n_mel: int,
    n_threads: int,
    filters: FilterBank
):
    if samples.ndim != 1:
        raise InvalidDimensionError(f"samples must be 1D, got shape {samples.shape}")
    if fft_size <= 0:
        raise InvalidDimensionError(f"fft_size must be positive, got {fft_size}")
    if hop_length <= 0:
        raise InvalidDimensionError(f"hop_length must be positive, got {hop_length}")
    if n_mel <= 0:
        raise InvalidDimensionError(f"n_mel must be positive, got {n_mel}")
    if n_threads < 1:
        raise InvalidDimensionError(f"n_threads must be >= 1, got {n_threads}")
    if not 0 <= n_samples <= samples.shape[0]:
        raise InvalidDimensionError(
            f"n_samples must be in [0, {samples.shape[0]}], got {n_samples}"
        )
    if filters.n_mel != n_mel:
        raise InvalidDimensionError(
            f"Filterbank has {filters.n_mel} mel bands, expected {n_mel}"
        )
    n_freq = 1 + fft_size // 2
    if filters.n_fft != n_freq:
        raise InvalidDimensionError(
            f"Filterbank has {filters.n_fft} frequency bins, "
            f"fft_size {fft_size} needs {n_freq}"
        )
    if filters.data.shape[0] != filters.n_mel * filters.n_fft:
        raise InvalidDimensionError(
            f"Filterbank data has {filters.data.shape[0]} weights, "
            f"expected {filters.n_mel * filters.n_fft}"
        )


def raw_log_mel(
    samples: np.ndarray,
    n_samples: int,
    fft_size: int,
    hop_length: int,
    n_mel: int,
    n_threads: int,
    filters: FilterBank
) -> np.ndarray:
    """
    Un-normalized log10 mel energies, shape (n_mel, n_samples // hop_length).

    Same validation and parallel fill as log_mel_spectrogram(), without the
    final clamp/rescale pass.
    """
    samples = np.ascontiguousarray(samples, dtype=np.float32)
    _validate(samples, n_samples, fft_size, hop_length, n_mel, n_threads, filters)

    n_len = n_samples // hop_length
    mel = np.zeros((n_mel, n_len), dtype=np.float32)

    return fill_log_mel(
        samples, n_samples, hann_window(fft_size), filters.matrix,
        hop_length, mel, n_threads
    )


def log_mel_spectrogram(
    samples: np.ndarray,
    n_samples: int,
    sample_rate: int,
    fft_size: int,
    hop_length: int,
    n_mel: int,
    n_threads: int,
    filters: FilterBank
) -> MelSpectrogram:
    """
    Compute a normalized log-mel spectrogram.

    Parameters
    ----------
    samples : np.ndarray
        Mono signal, already at the target sample rate
    n_samples : int
        Number of samples to analyse (<= len(samples))
    sample_rate : int
        Sample rate of samples; informational only
    fft_size : int
        Frame / FFT length
    hop_length : int
        Samples between frame starts
    n_mel : int
        Number of mel bands
    n_threads : int
        Number of frame workers
    filters : FilterBank
        Mel filterbank with n_mel rows and 1 + fft_size // 2 columns

    Returns
    -------
    MelSpectrogram
        n_mel x (n_samples // hop_length) matrix, normalized to roughly [-1, 1]

    Raises
    ------
    InvalidDimensionError
        On inconsistent parameters, before any work starts
    WorkerFailureError
        If a worker fails; no partial result is returned

    Examples
    --------
    >>> filters = mel_filterbank(16000, 400, 80)
    >>> y = np.random.randn(480000).astype(np.float32)
    >>> S = log_mel_spectrogram(y, len(y), 16000, 400, 160, 80, 4, filters)
    >>> S.shape  # (80, 3000)
    """
    logger.info(
        f"log-mel: n_samples={n_samples}, sr={sample_rate}, fft_size={fft_size}, "
        f"hop={hop_length}, n_mel={n_mel}, threads={n_threads}"
    )
    start = time.time()

    mel = raw_log_mel(samples, n_samples, fft_size, hop_length, n_mel, n_threads, filters)
    normalize_log_mel(mel)

    logger.info(f"log-mel: {mel.shape[0]} x {mel.shape[1]} in {(time.time() - start) * 1000:.1f} ms")

    return MelSpectrogram(
        n_mel=mel.shape[0],
        n_len=mel.shape[1],
        data=mel.reshape(-1),
        sample_rate=sample_rate
    )


def whisper_log_mel(
    audio: np.ndarray,
    config: Optional[MelConfig] = None,
    filters: Optional[FilterBank] = None,
    pad: bool = True
) -> MelSpectrogram:
    """
    Log-mel features for one Whisper chunk.

    Args:
        audio: Mono signal at config.sample_rate
        config: Front-end parameters (default: Whisper's)
        filters: Precomputed filterbank; built from config when None
        pad: Zero-pad / trim audio to config.n_samples first

    Returns:
        MelSpectrogram of shape (config.n_mels, config.n_frames) when padded
    """
    config = config or MelConfig()
    if filters is None:
        filters = mel_filterbank(config.sample_rate, config.n_fft, config.n_mels)

    audio = np.asarray(audio, dtype=np.float32)
    if pad:
        audio = pad_or_trim(audio, config.n_samples)

    return log_mel_spectrogram(
        audio,
        n_samples=audio.size,
        sample_rate=config.sample_rate,
        fft_size=config.n_fft,
        hop_length=config.hop_length,
        n_mel=config.n_mels,
        n_threads=config.n_threads,
        filters=filters
    )
