"""VoiceModelTrainer: build a custom voice model from a handful of recordings.

Training extracts features from every sample and aggregates them into a
compact statistics payload. The loop is exposed as a generator
(:meth:`VoiceModelTrainer.iter_train`) so callers can drive it step by
step; :meth:`VoiceModelTrainer.train` wraps it with a progress callback.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from collections.abc import Callable, Generator

import numpy as np

from voxfx_core.constants import SAMPLE_RATE
from voxfx_core.errors import TrainingCancelledError, TrainingError
from voxfx_core.types import (
    CustomVoiceModel,
    TrainingProgress,
    VoiceCharacteristics,
    VoiceFeatureSet,
)
from voxfx_data.features import VoiceFeatureExtractor
from voxfx_export.model_file import pack_model_payload

logger = logging.getLogger(__name__)

_EXTRACTION_SHARE = 0.9


def aggregate_features(features: list[VoiceFeatureSet]) -> dict:
    """Reduce per-sample features to the statistics stored in a model payload."""
    pitch = np.array([f.pitch for f in features], dtype=np.float64)
    return {
        "pitch_mean": float(pitch.mean()),
        "pitch_std": float(pitch.std()),
        "energy_mean": float(np.mean([f.energy for f in features])),
        "jitter_mean": float(np.mean([f.jitter for f in features])),
        "shimmer_mean": float(np.mean([f.shimmer for f in features])),
        "spectral_tilt_mean": float(np.mean([f.spectral_tilt for f in features])),
        "speaking_rate_mean": float(np.mean([f.speaking_rate for f in features])),
        "formants_mean": np.mean([f.formants for f in features], axis=0),
        "spectral_envelope_mean": np.mean(
            [f.spectral_envelope for f in features], axis=0,
        ),
        "mfcc_mean": np.mean([f.mfcc for f in features], axis=0),
    }


def generate_model_id(now_ms: int | None = None) -> str:
    """Return a fresh id of the form ``model_<ms>_<4 digits>``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"model_{now_ms}_{random.randint(1000, 9999)}"


class VoiceModelTrainer:
    """Train :class:`CustomVoiceModel` instances from PCM samples."""

    def __init__(
        self,
        extractor: VoiceFeatureExtractor | None = None,
        sample_rate: int = SAMPLE_RATE,
    ) -> None:
        self.extractor = extractor or VoiceFeatureExtractor()
        self.sample_rate = sample_rate

    def iter_train(
        self,
        samples: list[bytes],
        characteristics: VoiceCharacteristics,
        cancel_event: threading.Event | None = None,
    ) -> Generator[TrainingProgress, None, CustomVoiceModel]:
        """Generator yielding :class:`TrainingProgress` for each training step.

        The trained model is the generator's return value.

        Raises:
            TrainingError: If ``samples`` is empty or extraction fails.
            TrainingCancelledError: If ``cancel_event`` is set before a sample.
        """
        if not samples:
            raise TrainingError("No training samples provided")

        n = len(samples)
        yield TrainingProgress(0.0, "Starting training")

        features: list[VoiceFeatureSet] = []
        for i, data in enumerate(samples):
            if cancel_event is not None and cancel_event.is_set():
                raise TrainingCancelledError(f"Training cancelled after {i}/{n} samples")
            try:
                features.append(self.extractor.extract(data, self.sample_rate))
            except Exception as exc:
                raise TrainingError(f"Feature extraction failed for sample {i}: {exc}") from exc
            yield TrainingProgress(
                _EXTRACTION_SHARE * (i + 1) / n,
                f"Extracted features from sample {i + 1}/{n}",
            )

        yield TrainingProgress(0.95, "Building model payload")
        payload = pack_model_payload(aggregate_features(features))

        now_ms = int(time.time() * 1000)
        model = CustomVoiceModel(
            id=generate_model_id(now_ms),
            characteristics=characteristics,
            model_payload=payload,
            training_sample_count=n,
            created_at=now_ms,
        )
        yield TrainingProgress(1.0, "Training complete")
        logger.info("Trained model %s from %d samples", model.id, n)
        return model

    def train(
        self,
        samples: list[bytes],
        characteristics: VoiceCharacteristics,
        on_progress: Callable[[TrainingProgress], None] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> CustomVoiceModel:
        """Run :meth:`iter_train` to completion and return the model."""
        gen = self.iter_train(samples, characteristics, cancel_event)
        while True:
            try:
                event = next(gen)
            except StopIteration as stop:
                return stop.value
            if on_progress is not None:
                on_progress(event)
