"""Synthesizer: regenerate PCM from a voice feature set by additive sine synthesis."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from voxfx_core import pcm
from voxfx_core.constants import (
    FORMANT_AMPLITUDE,
    INT16_MAX,
    INT16_MIN,
    SAMPLE_RATE,
    SYNTHESIS_DURATION_SEC,
    SYNTHESIS_SEED,
)
from voxfx_core.types import VoiceFeatureSet

logger = logging.getLogger(__name__)


@dataclass
class SynthesizerConfig:
    sample_rate: int = SAMPLE_RATE
    duration_sec: float = SYNTHESIS_DURATION_SEC
    formant_amplitude: float = FORMANT_AMPLITUDE
    seed: int | None = SYNTHESIS_SEED  # None → fresh noise on every call


class Synthesizer:
    """Additive sinusoidal synthesizer.

    The output is a fundamental at ``features.pitch`` plus one partial per
    formant (amplitude ``formant_amplitude / (k + 1)``). The mix is
    normalized to unit RMS, perturbed by uniform noise of width
    ``features.jitter``, and scaled by ``sqrt(features.energy)`` so the
    output mean square tracks the feature energy.
    """

    def __init__(self, config: SynthesizerConfig | None = None) -> None:
        self.config = config or SynthesizerConfig()

    def synthesize_samples(
        self,
        features: VoiceFeatureSet,
        duration_sec: float | None = None,
    ) -> np.ndarray:
        """Synthesize int16 samples.

        Args:
            features: Target features.
            duration_sec: Output duration; defaults to ``config.duration_sec``.

        Returns:
            ``[round(duration_sec * sample_rate)]`` int16 samples.
        """
        cfg = self.config
        sr = cfg.sample_rate
        duration = cfg.duration_sec if duration_sec is None else duration_sec
        n_samples = int(np.floor(duration * sr + 0.5))

        t = np.arange(n_samples, dtype=np.float64) / sr
        wave = np.sin(2.0 * np.pi * features.pitch * t)
        for k, formant in enumerate(features.formants):
            # Partials above Nyquist would alias back into the band
            if formant >= sr / 2.0:
                continue
            wave += np.sin(2.0 * np.pi * formant * t) * cfg.formant_amplitude / (k + 1)

        rms = np.sqrt(np.mean(wave**2)) if n_samples else 0.0
        if rms > 0:
            wave /= rms

        rng = np.random.default_rng(cfg.seed)
        wave += (rng.random(n_samples) - 0.5) * features.jitter

        scaled = np.floor(wave * np.sqrt(max(features.energy, 0.0)) + 0.5)
        return np.clip(scaled, INT16_MIN, INT16_MAX).astype(np.int16)

    def synthesize(
        self,
        features: VoiceFeatureSet,
        duration_sec: float | None = None,
    ) -> bytes:
        """Synthesize 16-bit LE mono PCM at ``config.sample_rate``."""
        samples = self.synthesize_samples(features, duration_sec)
        logger.debug(
            "Synthesized %d samples at %.1f Hz with %d formants",
            samples.shape[0],
            features.pitch,
            len(features.formants),
        )
        return pcm.encode(samples)
