"""Tests for constant integrity and internal consistency."""

from voxfx_core import constants


def test_sample_rate():
    assert constants.SAMPLE_RATE == 44100


def test_pcm_is_16_bit():
    assert constants.SAMPLE_WIDTH_BYTES == 2
    assert constants.INT16_MIN == -32768
    assert constants.INT16_MAX == 32767


def test_n_freq_bins():
    assert constants.N_FREQ_BINS == constants.N_FFT // 2 + 1


def test_window_covers_hop():
    assert constants.WINDOW_LENGTH >= constants.HOP_LENGTH


def test_default_formants():
    assert len(constants.DEFAULT_FORMANTS_HZ) == constants.N_FORMANTS
    assert constants.DEFAULT_FORMANTS_HZ == sorted(constants.DEFAULT_FORMANTS_HZ)


def test_f0_range():
    assert 0 < constants.F0_MIN < constants.DEFAULT_PITCH_HZ < constants.F0_MAX


def test_cloning_limits():
    assert constants.MIN_TRAINING_SAMPLES == 5
    assert constants.MAX_TRAINING_SAMPLES == 20
    assert constants.MIN_SAMPLE_DURATION_MS == 3000
    assert constants.MAX_SAMPLE_DURATION_MS == 15000


def test_synthesis_defaults():
    assert constants.SYNTHESIS_DURATION_SEC == 2.0
    assert constants.FORMANT_AMPLITUDE == 0.3
