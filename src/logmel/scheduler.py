"""
Parallel frame processing.

Frames are dealt out to a fixed pool of workers with a stride: worker w
handles frames w, w + n_threads, w + 2 * n_threads, ... Each frame owns one
column of the output matrix, so workers never write the same memory and the
fill phase needs no locks. The caller gets control back only after every
worker has joined.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

import numpy as np
from numba import jit

from .exceptions import InvalidDimensionError, WorkerFailureError
from .fft import _fft_interleaved
from .filters import _power_spectrum, _project_column

logger = logging.getLogger(__name__)


@jit(nopython=True, nogil=True)
def _process_frames(
    samples: np.ndarray,
    n_samples: int,
    window: np.ndarray,
    filters: np.ndarray,
    hop_length: int,
    first_frame: int,
    stride: int,
    mel: np.ndarray
):
    """Window -> FFT -> power -> mel projection for frames first_frame, first_frame + stride, ..."""
    fft_size = window.shape[0]
    n_len = mel.shape[1]

    # Per-worker scratch buffer, reused for every frame
    fft_in = np.zeros(fft_size, dtype=np.float32)

    frame = first_frame
    while frame < n_len:
        offset = frame * hop_length

        # Hann window, zero past the end of the signal
        for j in range(fft_size):
            if offset + j < n_samples:
                fft_in[j] = window[j] * samples[offset + j]
            else:
                fft_in[j] = 0.0

        spectrum = _fft_interleaved(fft_in)
        power = _power_spectrum(spectrum, fft_size)
        _project_column(power, filters, mel, frame)

        frame += stride


def frame_assignment(n_len: int, n_threads: int) -> List[range]:
    """
    Strided partition of frames 0..n_len-1 over n_threads workers.

    Returns:
        One range per worker; worker w gets range(w, n_len, n_threads)
    """
    if n_threads < 1:
        raise InvalidDimensionError(f"n_threads must be >= 1, got {n_threads}")
    if n_len < 0:
        raise InvalidDimensionError(f"n_len must be >= 0, got {n_len}")
    return [range(worker_id, n_len, n_threads) for worker_id in range(n_threads)]


def _check_inputs(
    samples: np.ndarray,
    n_samples: int,
    window: np.ndarray,
    filters: np.ndarray,
    hop_length: int,
    mel: np.ndarray
):
    # kernels are compiled without bounds checks
    for name, array, ndim in [('samples', samples, 1), ('window', window, 1),
                              ('filters', filters, 2), ('mel', mel, 2)]:
        if array.ndim != ndim or array.dtype != np.float32:
            raise InvalidDimensionError(
                f"{name} must be a {ndim}D float32 array, got {array.ndim}D {array.dtype}"
            )
    if window.shape[0] == 0:
        raise InvalidDimensionError("window must not be empty")
    if hop_length <= 0:
        raise InvalidDimensionError(f"hop_length must be positive, got {hop_length}")
    if not 0 <= n_samples <= samples.shape[0]:
        raise InvalidDimensionError(
            f"n_samples must be in [0, {samples.shape[0]}], got {n_samples}"
        )
    n_freq = 1 + window.shape[0] // 2
    if filters.shape[1] != n_freq:
        raise InvalidDimensionError(
            f"Filterbank has {filters.shape[1]} frequency bins, "
            f"window of {window.shape[0]} needs {n_freq}"
        )
    if mel.shape[0] != filters.shape[0]:
        raise InvalidDimensionError(
            f"Output has {mel.shape[0]} rows, filterbank has {filters.shape[0]} mel bands"
        )


def _run_worker(
    worker_id: int,
    frames: range,
    samples: np.ndarray,
    n_samples: int,
    window: np.ndarray,
    filters: np.ndarray,
    hop_length: int,
    mel: np.ndarray
):
    logger.debug(f"Worker {worker_id}: {len(frames)} frames (start={frames.start}, stride={frames.step})")
    _process_frames(samples, n_samples, window, filters, hop_length, frames.start, frames.step, mel)
    logger.debug(f"Worker {worker_id}: done")


def fill_log_mel(
    samples: np.ndarray,
    n_samples: int,
    window: np.ndarray,
    filters: np.ndarray,
    hop_length: int,
    mel: np.ndarray,
    n_threads: int
) -> np.ndarray:
    """
    Fill every column of `mel` with raw (un-normalized) log10 mel energies.

    Parameters
    ----------
    samples : np.ndarray
        float32 signal; only the first n_samples values are read
    n_samples : int
        Readable length of samples
    window : np.ndarray
        float32 analysis window, its length is the FFT size
    filters : np.ndarray
        float32 filterbank matrix, shape (n_mel, 1 + fft_size // 2)
    hop_length : int
        Samples between consecutive frame starts
    mel : np.ndarray
        float32 output matrix of shape (n_mel, n_len), written in place
    n_threads : int
        Number of workers

    Returns
    -------
    np.ndarray
        mel, fully populated

    Raises
    ------
    InvalidDimensionError
        If shapes or dtypes are inconsistent; checked before any worker starts
    WorkerFailureError
        If any worker raises. The matrix must then be considered garbage.
    """
    _check_inputs(samples, n_samples, window, filters, hop_length, mel)
    assignment = frame_assignment(mel.shape[1], n_threads)

    with ThreadPoolExecutor(max_workers=n_threads, thread_name_prefix='logmel-worker') as executor:
        futures = [
            executor.submit(
                _run_worker, worker_id, frames,
                samples, n_samples, window, filters, hop_length, mel
            )
            for worker_id, frames in enumerate(assignment)
        ]

        # Join all; the first failure aborts the whole call
        for worker_id, future in enumerate(futures):
            try:
                future.result()
            except Exception as exc:
                logger.error(f"Worker {worker_id} failed: {exc}")
                raise WorkerFailureError(worker_id, exc) from exc

    return mel
