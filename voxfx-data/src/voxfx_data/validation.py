"""Training sample validation for custom voice models."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from voxfx_core import pcm
from voxfx_core.constants import (
    MAX_SAMPLE_DURATION_MS,
    MAX_TRAINING_SAMPLES,
    MIN_SAMPLE_DURATION_MS,
    MIN_SAMPLE_QUALITY,
    MIN_TRAINING_SAMPLES,
    SAMPLE_RATE,
)

logger = logging.getLogger(__name__)


@dataclass
class CloningConfig:
    """Limits applied to custom voice training samples."""

    min_training_samples: int = MIN_TRAINING_SAMPLES
    max_training_samples: int = MAX_TRAINING_SAMPLES
    min_sample_duration_ms: int = MIN_SAMPLE_DURATION_MS
    max_sample_duration_ms: int = MAX_SAMPLE_DURATION_MS
    min_quality: float = MIN_SAMPLE_QUALITY
    supported_formats: tuple[str, ...] = ("WAV", "PCM", "FLAC")


@dataclass
class ValidationResult:
    is_valid: bool
    issues: list[str] = field(default_factory=list)
    quality: float = 0.0


def estimate_quality(
    samples: np.ndarray,
    sample_rate: int = SAMPLE_RATE,
    frame_ms: float = 20.0,
) -> float:
    """Score a recording in ``[0, 1]`` from its dynamic range and clipping.

    The 90th/10th percentile ratio of frame RMS approximates the SNR
    (speech frames vs. background frames); 30 dB or more scores 1.
    The score is scaled down by the fraction of clipped samples.
    """
    if samples.shape[0] == 0:
        return 0.0
    frame_len = max(1, int(sample_rate * frame_ms / 1000.0))
    n_frames = samples.shape[0] // frame_len
    if n_frames < 2:
        return 0.0

    x = samples[: n_frames * frame_len].astype(np.float64).reshape(n_frames, frame_len)
    rms = np.sqrt(np.mean(x**2, axis=1))
    signal = np.percentile(rms, 90)
    noise = np.percentile(rms, 10)
    if signal <= 0:
        return 0.0
    snr_db = 60.0 if noise <= 0 else 20.0 * np.log10(signal / noise)

    clipped = np.mean(np.abs(samples.astype(np.int32)) >= 32767)
    score = min(1.0, max(0.0, snr_db / 30.0)) * (1.0 - clipped)
    return round(float(score), 4)


class SampleValidator:
    """Check training samples against a :class:`CloningConfig`."""

    def __init__(self, config: CloningConfig | None = None) -> None:
        self.config = config or CloningConfig()

    def validate(self, data: bytes, sample_rate: int = SAMPLE_RATE) -> ValidationResult:
        """Validate a single PCM sample.

        Raises:
            InvalidBufferError: If ``data`` has an odd length.
        """
        cfg = self.config
        samples = pcm.decode(data)
        duration = pcm.duration_ms(data, sample_rate)
        issues: list[str] = []

        if duration < cfg.min_sample_duration_ms:
            issues.append(
                f"Recording too short: at least {cfg.min_sample_duration_ms // 1000} s required"
            )
        if duration > cfg.max_sample_duration_ms:
            issues.append(
                f"Recording too long: at most {cfg.max_sample_duration_ms // 1000} s allowed"
            )

        quality = estimate_quality(samples, sample_rate)
        if quality < cfg.min_quality:
            issues.append("Audio quality too low, record again in a quiet place")

        if not np.any(samples):
            issues.append("No voice content detected")

        return ValidationResult(is_valid=not issues, issues=issues, quality=quality)

    def validate_batch(
        self,
        samples: list[bytes],
        sample_rate: int = SAMPLE_RATE,
    ) -> list[ValidationResult]:
        """Validate every sample plus the sample-count limits.

        Count problems are reported on an extra trailing result.
        """
        cfg = self.config
        results = [self.validate(s, sample_rate) for s in samples]

        count_issues = []
        if len(samples) < cfg.min_training_samples:
            count_issues.append(
                f"Too few samples: {len(samples)} < {cfg.min_training_samples}"
            )
        if len(samples) > cfg.max_training_samples:
            count_issues.append(
                f"Too many samples: {len(samples)} > {cfg.max_training_samples}"
            )
        if count_issues:
            results.append(ValidationResult(is_valid=False, issues=count_issues))

        n_invalid = sum(not r.is_valid for r in results)
        if n_invalid:
            logger.info("%d of %d validation results failed", n_invalid, len(results))
        return results
