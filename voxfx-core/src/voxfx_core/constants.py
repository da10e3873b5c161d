"""VoxFX shared constants loaded from configs/constants.yaml."""

from pathlib import Path

import yaml

_YAML_PATH = Path(__file__).resolve().parents[3] / "configs" / "constants.yaml"

with open(_YAML_PATH, encoding="utf-8") as f:
    _cfg = yaml.safe_load(f)

# --- PCM ---
SAMPLE_RATE: int = _cfg["sample_rate"]
SAMPLE_WIDTH_BYTES: int = _cfg["sample_width_bytes"]
INT16_MIN: int = _cfg["int16_min"]
INT16_MAX: int = _cfg["int16_max"]

# --- Spectral Front End ---
N_FFT: int = _cfg["n_fft"]
HOP_LENGTH: int = _cfg["hop_length"]
WINDOW_LENGTH: int = _cfg["window_length"]
N_MELS: int = _cfg["n_mels"]
MEL_FMIN: float = _cfg["mel_fmin"]
MEL_FMAX: float = _cfg["mel_fmax"]
N_FREQ_BINS: int = _cfg["n_freq_bins"]
LOG_FLOOR: float = _cfg["log_floor"]
N_MFCC: int = _cfg["n_mfcc"]
N_ENVELOPE_BANDS: int = _cfg["n_envelope_bands"]

# --- Basic Effects ---
ROBOT_MODULATION_HZ: float = _cfg["robot_modulation_hz"]

# --- Feature Extraction ---
F0_MIN: float = _cfg["f0_min"]
F0_MAX: float = _cfg["f0_max"]
VOICING_THRESHOLD: float = _cfg["voicing_threshold"]
DEFAULT_PITCH_HZ: float = _cfg["default_pitch_hz"]
N_FORMANTS: int = _cfg["n_formants"]
DEFAULT_FORMANTS_HZ: list[float] = _cfg["default_formants_hz"]
FORMANT_MIN_HZ: float = _cfg["formant_min_hz"]
FORMANT_MAX_BANDWIDTH_HZ: float = _cfg["formant_max_bandwidth_hz"]
FORMANT_FRAMES: int = _cfg["formant_frames"]
TILT_FMIN: float = _cfg["tilt_fmin"]
SYLLABLE_THRESHOLD: float = _cfg["syllable_threshold"]
MIN_SPEAKING_RATE: float = _cfg["min_speaking_rate"]

# --- Synthesis ---
SYNTHESIS_DURATION_SEC: float = _cfg["synthesis_duration_sec"]
FORMANT_AMPLITUDE: float = _cfg["formant_amplitude"]
SYNTHESIS_SEED: int = _cfg["synthesis_seed"]

# --- Voice Cloning ---
MIN_TRAINING_SAMPLES: int = _cfg["min_training_samples"]
MAX_TRAINING_SAMPLES: int = _cfg["max_training_samples"]
MIN_SAMPLE_DURATION_MS: int = _cfg["min_sample_duration_ms"]
MAX_SAMPLE_DURATION_MS: int = _cfg["max_sample_duration_ms"]
MIN_SAMPLE_QUALITY: float = _cfg["min_sample_quality"]
