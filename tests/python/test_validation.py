"""Tests for training sample validation."""

from __future__ import annotations

import numpy as np
import pytest

from voxfx_core.errors import InvalidBufferError
from voxfx_data.validation import CloningConfig, SampleValidator, estimate_quality


@pytest.fixture
def validator() -> SampleValidator:
    return SampleValidator()


class TestEstimateQuality:
    def test_empty(self):
        assert estimate_quality(np.zeros(0, dtype=np.int16)) == 0.0

    def test_silence(self):
        assert estimate_quality(np.zeros(44100, dtype=np.int16)) == 0.0

    def test_steady_tone_scores_low(self, sine_pcm):
        samples = np.frombuffer(sine_pcm, dtype="<i2")
        assert estimate_quality(samples) < 0.3

    def test_bursts_score_high(self, speech_like_pcm):
        samples = np.frombuffer(speech_like_pcm, dtype="<i2")
        assert estimate_quality(samples) == 1.0

    def test_deterministic(self, speech_like_pcm):
        samples = np.frombuffer(speech_like_pcm, dtype="<i2")
        assert estimate_quality(samples) == estimate_quality(samples)


class TestValidate:
    def test_valid_sample(self, validator, speech_like_pcm):
        result = validator.validate(speech_like_pcm)
        assert result.is_valid, result.issues
        assert result.issues == []

    def test_too_short(self, validator, sine_pcm):
        result = validator.validate(sine_pcm)
        assert not result.is_valid
        assert any("too short" in issue for issue in result.issues)

    def test_too_long(self, validator):
        result = validator.validate(b"\x01\x00" * (44100 * 16))
        assert any("too long" in issue for issue in result.issues)

    def test_silence(self, validator):
        result = validator.validate(b"\x00\x00" * (44100 * 4))
        assert "No voice content detected" in result.issues
        assert result.quality == 0.0

    def test_odd_buffer(self, validator):
        with pytest.raises(InvalidBufferError):
            validator.validate(b"\x00")

    def test_custom_limits(self, sine_pcm):
        validator = SampleValidator(CloningConfig(min_sample_duration_ms=500, min_quality=0.0))
        assert validator.validate(sine_pcm).is_valid


class TestValidateBatch:
    def test_count_too_low(self, validator, speech_like_pcm):
        results = validator.validate_batch([speech_like_pcm] * 2)
        assert len(results) == 3
        assert all(r.is_valid for r in results[:2])
        assert not results[-1].is_valid
        assert "Too few samples" in results[-1].issues[0]

    def test_count_ok(self, validator, speech_like_pcm):
        results = validator.validate_batch([speech_like_pcm] * 5)
        assert len(results) == 5
        assert all(r.is_valid for r in results)

    def test_count_too_high(self, validator, speech_like_pcm):
        results = validator.validate_batch([speech_like_pcm] * 21)
        assert "Too many samples" in results[-1].issues[0]
