import numpy as np


# Dynamic range kept below the loudest entry, in log10 units (80 dB)
DYNAMIC_RANGE = 8.0
# Offset and scale that map the kept range to roughly [-1, 1]
OFFSET = 4.0
SCALE = 4.0


def normalize_log_mel(mel: np.ndarray) -> np.ndarray:
    """
    Clamp and rescale a log-mel matrix in place.

    Every entry more than 8.0 below the global maximum is raised to
    max - 8.0, then each entry is mapped to (value + 4.0) / 4.0.
    Must only be called once the whole matrix has been filled.

    Args:
        mel: float32 log10 mel energies, any shape

    Returns:
        The same array, normalized
    """
    if mel.size == 0:
        return mel

    floor = float(mel.max()) - DYNAMIC_RANGE
    np.maximum(mel, np.float32(floor), out=mel)
    mel[...] = (mel.astype(np.float64) + OFFSET) / SCALE
    return mel
