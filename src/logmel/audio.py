"""
Audio input helpers.

No resampling happens here: audio must already be at the front-end's sample
rate, as the log-mel core expects.
"""

from pathlib import Path
from typing import Union

import numpy as np
import librosa

from .config import SAMPLE_RATE, N_SAMPLES


def pad_or_trim(audio: np.ndarray, length: int = N_SAMPLES, pad_value: float = 0.0) -> np.ndarray:
    """
    Pad or trim a mono waveform to exactly `length` samples.

    Args:
        audio: 1-D waveform
        length: Target number of samples (default: one 30 s Whisper chunk)
        pad_value: Value used for padding

    Returns:
        Waveform of exactly `length` samples
    """
    audio = np.asarray(audio)
    if audio.ndim != 1:
        raise ValueError(f"Input must be 1D, got shape {audio.shape}")
    if length < 0:
        raise ValueError(f"length must be >= 0, got {length}")

    current_length = audio.shape[0]

    if current_length == length:
        return audio

    elif current_length > length:
        # Trim
        return audio[:length]

    else:
        # Pad
        return np.pad(
            audio, (0, length - current_length),
            mode='constant', constant_values=pad_value
        )


def load_audio(path: Union[str, Path], sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """
    Load a mono float32 waveform at its native rate.

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the file cannot be decoded, or its sample rate differs
            from `sample_rate`
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Audio file not found: {path}")

    try:
        y, sr = librosa.load(str(path), sr=None, mono=True)
    except Exception as exc:
        # soundfile and the audioread fallback each raise their own error types
        raise ValueError(f"{path.name}: cannot decode audio ({exc})") from exc

    if sr != sample_rate:
        raise ValueError(
            f"{path.name}: sample rate {sr} Hz, expected {sample_rate} Hz (resample first)"
        )

    return y.astype(np.float32, copy=False)
