"""16-bit little-endian mono PCM codec."""

from __future__ import annotations

import numpy as np

from voxfx_core.constants import INT16_MAX, INT16_MIN, SAMPLE_WIDTH_BYTES
from voxfx_core.errors import InvalidBufferError

PCM_DTYPE = np.dtype("<i2")


def decode(data: bytes) -> np.ndarray:
    """Decode a PCM byte buffer into int16 samples.

    Raises:
        InvalidBufferError: If ``len(data)`` is odd.
    """
    if len(data) % SAMPLE_WIDTH_BYTES != 0:
        raise InvalidBufferError(
            f"PCM buffer length must be even, got {len(data)} bytes"
        )
    # Copy so callers may mutate the result without touching ``data``
    return np.frombuffer(data, dtype=PCM_DTYPE).astype(np.int16)


def encode(samples) -> bytes:
    """Encode samples as PCM bytes, clamping to the int16 range."""
    arr = np.asarray(samples)
    if arr.dtype != np.int16:
        arr = np.clip(arr, INT16_MIN, INT16_MAX)
    return arr.astype(PCM_DTYPE).tobytes()


def duration_ms(data: bytes, sample_rate: int) -> int:
    """Duration of a PCM buffer in whole milliseconds."""
    n_samples = len(data) // SAMPLE_WIDTH_BYTES
    return (n_samples * 1000) // sample_rate


def to_float(samples: np.ndarray) -> np.ndarray:
    """int16 samples → float32 in ``[-1, 1)``."""
    return np.asarray(samples, dtype=np.float32) / 32768.0


def from_float(audio: np.ndarray) -> np.ndarray:
    """float audio in ``[-1, 1]`` → int16 samples (rounded, clamped)."""
    scaled = np.floor(np.asarray(audio, dtype=np.float64) * 32768.0 + 0.5)
    return np.clip(scaled, INT16_MIN, INT16_MAX).astype(np.int16)
