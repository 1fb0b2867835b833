"""
logmel - Whisper Log-Mel Spectrogram Front-End

Hand-written, multi-threaded implementation of the audio front-end used by
Whisper-style speech recognition models: raw 16 kHz mono samples in, a
normalized n_mels x n_frames log-mel matrix out.

Modules:
    - window: Hann analysis window
    - fft: Recursive radix-2 FFT with a direct-DFT fallback (Numba JIT)
    - filters: Power spectrum folding and mel filterbank projection
    - scheduler: Strided frame partitioning over a worker pool
    - normalize: Global clamp and rescale
    - spectrogram: Entry points
"""

from .exceptions import LogMelError, InvalidDimensionError, WorkerFailureError
from .config import (
    MelConfig,
    load_config,
    SAMPLE_RATE,
    N_FFT,
    HOP_LENGTH,
    N_MELS,
    CHUNK_LENGTH,
    N_SAMPLES,
    N_FRAMES,
)
from .window import hann_window
from .fft import fft, dft, fft_interleaved
from .filters import FilterBank, mel_filterbank, power_spectrum, project_frame
from .scheduler import frame_assignment, fill_log_mel
from .normalize import normalize_log_mel
from .audio import pad_or_trim, load_audio
from .spectrogram import MelSpectrogram, log_mel_spectrogram, raw_log_mel, whisper_log_mel

__all__ = [
    # Errors
    'LogMelError',
    'InvalidDimensionError',
    'WorkerFailureError',
    # Configuration
    'MelConfig',
    'load_config',
    'SAMPLE_RATE',
    'N_FFT',
    'HOP_LENGTH',
    'N_MELS',
    'CHUNK_LENGTH',
    'N_SAMPLES',
    'N_FRAMES',
    # Pipeline stages
    'hann_window',
    'fft',
    'dft',
    'fft_interleaved',
    'FilterBank',
    'mel_filterbank',
    'power_spectrum',
    'project_frame',
    'frame_assignment',
    'fill_log_mel',
    'normalize_log_mel',
    # Audio helpers
    'pad_or_trim',
    'load_audio',
    # Entry points
    'MelSpectrogram',
    'log_mel_spectrogram',
    'raw_log_mel',
    'whisper_log_mel',
]

__version__ = '1.0.0'
