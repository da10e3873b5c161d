"""Tests for custom voice model training."""

from __future__ import annotations

import re
import threading

import numpy as np
import pytest

from voxfx_core.errors import TrainingCancelledError, TrainingError
from voxfx_export.model_file import unpack_model_payload
from voxfx_train.trainer import (
    VoiceModelTrainer,
    aggregate_features,
    generate_model_id,
)


@pytest.fixture(scope="module")
def trainer() -> VoiceModelTrainer:
    return VoiceModelTrainer()


@pytest.fixture
def five_samples(sine_pcm, speech_like_pcm) -> list[bytes]:
    return [sine_pcm, speech_like_pcm, sine_pcm, speech_like_pcm, sine_pcm]


class TestTrain:
    def test_model_fields(self, trainer, five_samples, neutral_characteristics):
        model = trainer.train(five_samples, neutral_characteristics)
        assert model.training_sample_count == 5
        assert model.created_at > 0
        assert model.characteristics == neutral_characteristics
        assert re.fullmatch(r"model_\d+_\d{4}", model.id)

    def test_payload_holds_statistics(self, trainer, five_samples, neutral_characteristics):
        model = trainer.train(five_samples, neutral_characteristics)
        stats = unpack_model_payload(model.model_payload)
        assert stats["pitch_mean"] > 0
        assert stats["formants_mean"].shape == (4,)
        assert stats["mfcc_mean"].shape == (13,)

    def test_progress_non_decreasing(self, trainer, five_samples, neutral_characteristics):
        events = []
        trainer.train(five_samples, neutral_characteristics, on_progress=events.append)
        progress = [e.progress for e in events]
        assert progress[0] == 0.0
        assert progress[-1] == 1.0
        assert progress == sorted(progress)
        assert 0.95 in progress
        assert len(events) == 5 + 3

    def test_empty_samples(self, trainer, neutral_characteristics):
        with pytest.raises(TrainingError, match="No training samples"):
            trainer.train([], neutral_characteristics)

    def test_extraction_failure_is_chained(self, trainer, sine_pcm, neutral_characteristics):
        with pytest.raises(TrainingError) as info:
            trainer.train([sine_pcm, b"\x00\x00\x00"], neutral_characteristics)
        assert info.value.__cause__ is not None

    def test_cancelled(self, trainer, five_samples, neutral_characteristics):
        cancel = threading.Event()
        cancel.set()
        events = []
        with pytest.raises(TrainingCancelledError):
            trainer.train(
                five_samples, neutral_characteristics,
                on_progress=events.append, cancel_event=cancel,
            )
        assert [e.progress for e in events] == [0.0]

    def test_cancelled_is_training_error(self, trainer, five_samples, neutral_characteristics):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(TrainingError):
            trainer.train(five_samples, neutral_characteristics, cancel_event=cancel)


class TestIterTrain:
    def test_returns_model_via_stop_iteration(self, trainer, sine_pcm, neutral_characteristics):
        gen = trainer.iter_train([sine_pcm], neutral_characteristics)
        events = []
        with pytest.raises(StopIteration) as info:
            while True:
                events.append(next(gen))
        assert info.value.value.training_sample_count == 1
        assert [e.message for e in events][-1] == "Training complete"


class TestHelpers:
    def test_generate_model_id(self):
        model_id = generate_model_id(1234)
        prefix, digits = model_id.rsplit("_", 1)
        assert prefix == "model_1234"
        assert 1000 <= int(digits) <= 9999

    def test_aggregate(self, mock_features):
        stats = aggregate_features([mock_features, mock_features])
        assert stats["pitch_mean"] == 200.0
        assert stats["pitch_std"] == 0.0
        np.testing.assert_allclose(stats["formants_mean"], mock_features.formants)
