"""Shared test fixtures: synthetic PCM, feature sets, characteristics."""

from __future__ import annotations

import numpy as np
import pytest

from voxfx_core import pcm
from voxfx_core.constants import SAMPLE_RATE
from voxfx_core.types import (
    Age,
    CustomVoiceModel,
    Emotion,
    Gender,
    VoiceCharacteristics,
    VoiceFeatureSet,
)


def make_sine_pcm(
    freq: float = 440.0,
    duration_sec: float = 1.0,
    amplitude: float = 32767.0,
    sample_rate: int = SAMPLE_RATE,
) -> bytes:
    """Sine tone as 16-bit LE PCM (values truncated towards zero)."""
    n = int(duration_sec * sample_rate)
    i = np.arange(n)
    samples = (np.sin(2.0 * np.pi * freq * i / sample_rate) * amplitude).astype(np.int16)
    return pcm.encode(samples)


def make_speech_like_pcm(
    duration_sec: float = 4.0,
    sample_rate: int = SAMPLE_RATE,
    seed: int = 0,
) -> bytes:
    """Alternating 250 ms tone bursts and low-level noise."""
    rng = np.random.default_rng(seed)
    n = int(duration_sec * sample_rate)
    i = np.arange(n)
    tone = 0.5 * 32767.0 * np.sin(2.0 * np.pi * 180.0 * i / sample_rate)
    gate = (i // int(0.25 * sample_rate)) % 2 == 0
    noise = rng.uniform(-10.0, 10.0, n)
    return pcm.encode(np.round(np.where(gate, tone, noise)).astype(np.int16))


@pytest.fixture
def sample_rate() -> int:
    return SAMPLE_RATE


@pytest.fixture
def sine_pcm() -> bytes:
    """1 second of full-scale 440 Hz sine at 44.1 kHz (88200 bytes)."""
    return make_sine_pcm()


@pytest.fixture
def short_pcm() -> bytes:
    """100 ms of 440 Hz sine at half scale."""
    return make_sine_pcm(duration_sec=0.1, amplitude=16384.0)


@pytest.fixture
def speech_like_pcm() -> bytes:
    return make_speech_like_pcm()


@pytest.fixture
def mock_features() -> VoiceFeatureSet:
    return VoiceFeatureSet(
        pitch=200.0,
        formants=[500.0, 1500.0, 2500.0, 3500.0],
        spectral_envelope=np.full(25, 0.5, dtype=np.float32),
        energy=1000.0,
        jitter=0.01,
        shimmer=0.02,
        spectral_tilt=-6.0,
        speaking_rate=4.5,
        mfcc=np.full(13, 0.1, dtype=np.float32),
    )


@pytest.fixture
def neutral_characteristics() -> VoiceCharacteristics:
    return VoiceCharacteristics(Emotion.NEUTRAL, Gender.NEUTRAL, Age.YOUNG_ADULT)


@pytest.fixture
def custom_model() -> CustomVoiceModel:
    return CustomVoiceModel(
        id="my_voice",
        characteristics=VoiceCharacteristics(
            Emotion.HAPPY,
            Gender.FEMALE,
            Age.ADULT,
            accent="en-GB",
            pitch_range=(0.8, 1.5),
            formant_shift=1.2,
        ),
        model_payload=b"\x00\x01\x02payload",
        training_sample_count=5,
        created_at=1_700_000_000_000,
    )
