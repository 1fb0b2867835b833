"""
Front-end configuration.

The defaults reproduce the Whisper audio front-end: 30 second chunks of
16 kHz audio, a 400-sample (25 ms) Hann window, a 160-sample (10 ms) hop and
80 mel bands, giving an 80 x 3000 log-mel matrix per chunk.
"""

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Dict, Union

import yaml


SAMPLE_RATE = 16000
N_FFT = 400
HOP_LENGTH = 160
N_MELS = 80
CHUNK_LENGTH = 30  # seconds
N_SAMPLES = CHUNK_LENGTH * SAMPLE_RATE  # 480000
N_FRAMES = N_SAMPLES // HOP_LENGTH  # 3000


@dataclass
class MelConfig:
    """Parameters of one log-mel extraction run."""
    sample_rate: int = SAMPLE_RATE
    n_fft: int = N_FFT
    hop_length: int = HOP_LENGTH
    n_mels: int = N_MELS
    chunk_length: int = CHUNK_LENGTH
    n_threads: int = 4

    @property
    def n_samples(self) -> int:
        """Number of samples in one chunk."""
        return self.chunk_length * self.sample_rate

    @property
    def n_frames(self) -> int:
        """Number of spectrogram columns produced for one chunk."""
        return self.n_samples // self.hop_length

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Dict) -> 'MelConfig':
        """
        Build a config from a plain mapping.

        Args:
            values: Mapping of field names to values. Missing fields keep
                their defaults.

        Returns:
            MelConfig instance

        Raises:
            ValueError: If the mapping contains keys that are not config fields
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**{key: int(value) for key, value in values.items()})


def load_config(config_path: Union[str, Path]) -> MelConfig:
    """
    Load a MelConfig from a YAML file.

    The values may sit under a top-level ``mel:`` section or directly at the
    top level of the document.
    """
    with open(config_path, 'r') as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config {config_path} must be a mapping, got {type(raw).__name__}")

    section = raw.get('mel', raw)
    if not isinstance(section, dict):
        raise ValueError(f"'mel' section of {config_path} must be a mapping")

    return MelConfig.from_dict(section)
