"""Tests for additive synthesis."""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from voxfx_core import pcm
from voxfx_train.synthesizer import Synthesizer, SynthesizerConfig


@pytest.fixture
def synth() -> Synthesizer:
    return Synthesizer()


class TestSynthesizer:
    def test_default_duration(self, synth, mock_features):
        data = synth.synthesize(mock_features)
        assert len(data) == 2 * 88200

    def test_duration_override(self, synth, mock_features):
        assert len(synth.synthesize(mock_features, duration_sec=0.5)) == 2 * 22050

    def test_config_sample_rate(self, mock_features):
        synth = Synthesizer(SynthesizerConfig(sample_rate=16000, duration_sec=1.0))
        assert len(synth.synthesize(mock_features)) == 2 * 16000

    def test_deterministic(self, synth, mock_features):
        assert synth.synthesize(mock_features) == synth.synthesize(mock_features)

    def test_mean_square_tracks_energy(self, synth, mock_features):
        samples = pcm.decode(synth.synthesize(mock_features)).astype(np.float64)
        assert np.mean(samples**2) == pytest.approx(mock_features.energy, rel=0.02)

    def test_zero_energy_is_silent(self, synth, mock_features):
        features = dataclasses.replace(mock_features, energy=0.0)
        assert not pcm.decode(synth.synthesize(features)).any()

    def test_fundamental_dominates(self, synth, mock_features):
        features = dataclasses.replace(mock_features, pitch=300.0, energy=1e6)
        samples = pcm.decode(synth.synthesize(features, duration_sec=1.0)).astype(np.float64)
        spectrum = np.abs(np.fft.rfft(samples))
        freqs = np.fft.rfftfreq(samples.shape[0], d=1.0 / 44100)
        assert freqs[np.argmax(spectrum)] == pytest.approx(300.0, abs=1.0)

    def test_formants_above_nyquist_skipped(self, synth, mock_features):
        with_high = dataclasses.replace(mock_features, formants=[30000.0])
        without = dataclasses.replace(mock_features, formants=[])
        assert synth.synthesize(with_high) == synth.synthesize(without)

    def test_clamped_to_int16(self, synth, mock_features):
        loud = dataclasses.replace(mock_features, energy=1e12)
        samples = pcm.decode(synth.synthesize(loud))
        assert samples.max() == 32767
        assert samples.min() == -32768

    def test_samples_dtype(self, synth, mock_features):
        samples = synth.synthesize_samples(mock_features, duration_sec=0.1)
        assert samples.dtype == np.int16
        assert samples.shape == (4410,)
