"""Basic voice effects: linear-interpolation resampling and robot modulation.

Both pitch shift and speed change are implemented as time-axis resampling.
A basic effect runs them as two sequential passes (pitch first, then
speed), so the output length is ``round(round(n / pitch) / speed)`` rather
than ``round(n / (pitch * speed))``.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from voxfx_core import pcm
from voxfx_core.constants import INT16_MAX, INT16_MIN, ROBOT_MODULATION_HZ, SAMPLE_RATE
from voxfx_core.errors import InvalidParameterError
from voxfx_core.types import VoiceEffectSpec

logger = logging.getLogger(__name__)

IDENTITY_EFFECT_ID = "none"
ROBOT_EFFECT_ID = "robot"


def _round_half_up(x: np.ndarray | float):
    return np.floor(np.asarray(x, dtype=np.float64) + 0.5)


def resample(samples: np.ndarray, ratio: float) -> np.ndarray:
    """Resample ``samples`` along the time axis by ``ratio``.

    ``ratio > 1`` shortens the signal (raises pitch / plays faster),
    ``ratio < 1`` lengthens it.

    Args:
        samples: ``[n]`` int16 samples.
        ratio: Source samples consumed per output sample.

    Returns:
        ``[round(n / ratio)]`` int16 samples. The input object itself when
        ``ratio == 1.0``.

    Raises:
        InvalidParameterError: If ``ratio`` is not a finite positive number.
    """
    if not math.isfinite(ratio) or ratio <= 0:
        raise InvalidParameterError(f"Resampling ratio must be > 0, got {ratio}")
    if ratio == 1.0:
        return samples

    x = np.asarray(samples, dtype=np.int16)
    n = x.shape[0]
    out_len = int(math.floor(n / ratio + 0.5))
    out = np.zeros(out_len, dtype=np.int16)
    if out_len == 0 or n == 0:
        return out

    pos = np.arange(out_len, dtype=np.float64) * ratio
    j = np.floor(pos).astype(np.int64)
    frac = pos - j

    interp = j + 1 < n
    ji = j[interp]
    fi = frac[interp]
    xf = x.astype(np.float64)
    mixed = (1.0 - fi) * xf[ji] + fi * xf[ji + 1]
    out[interp] = np.clip(_round_half_up(mixed), INT16_MIN, INT16_MAX).astype(np.int16)

    # Last source sample is held; anything past the end stays silent
    tail = ~interp & (j < n)
    out[tail] = x[j[tail]]
    return out


def modulate(
    samples: np.ndarray,
    sample_rate: int = SAMPLE_RATE,
    frequency_hz: float = ROBOT_MODULATION_HZ,
) -> np.ndarray:
    """Amplitude-modulate ``samples`` with a raised sine (robot voice)."""
    x = np.asarray(samples, dtype=np.float64)
    i = np.arange(x.shape[0], dtype=np.float64)
    mod = 0.5 + 0.5 * np.sin(2.0 * np.pi * frequency_hz * i / sample_rate)
    out = _round_half_up(x * mod)
    return np.clip(out, INT16_MIN, INT16_MAX).astype(np.int16)


def apply_basic(
    data: bytes,
    spec: VoiceEffectSpec,
    sample_rate: int = SAMPLE_RATE,
) -> bytes:
    """Apply a BASIC-category effect to a PCM buffer.

    Args:
        data: 16-bit LE mono PCM.
        spec: Effect to apply.
        sample_rate: Sample rate of ``data``; only the robot effect uses it.

    Returns:
        Processed PCM. ``data`` itself for the identity effect.
    """
    if spec.id == IDENTITY_EFFECT_ID:
        return data

    samples = pcm.decode(data)
    if spec.id == ROBOT_EFFECT_ID:
        processed = modulate(samples, sample_rate)
    else:
        pitched = resample(samples, spec.pitch_shift)
        processed = resample(pitched, spec.speed_multiplier)

    logger.debug(
        "Applied %s: %d -> %d samples", spec.id, samples.shape[0], processed.shape[0]
    )
    return pcm.encode(processed)
