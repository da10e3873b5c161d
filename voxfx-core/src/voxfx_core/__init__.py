"""voxfx-core: shared constants, PCM codec, basic effects and the effect catalog."""

from voxfx_core.catalog import get_effect, list_effects
from voxfx_core.constants import (
    HOP_LENGTH,
    N_FFT,
    N_MELS,
    N_MFCC,
    SAMPLE_RATE,
    WINDOW_LENGTH,
)
from voxfx_core.effects import apply_basic, modulate, resample
from voxfx_core.errors import (
    ConfigurationError,
    InvalidBufferError,
    InvalidParameterError,
    TrainingCancelledError,
    TrainingError,
    VoxFXError,
)

__all__ = [
    "HOP_LENGTH",
    "N_FFT",
    "N_MELS",
    "N_MFCC",
    "SAMPLE_RATE",
    "WINDOW_LENGTH",
    "ConfigurationError",
    "InvalidBufferError",
    "InvalidParameterError",
    "TrainingCancelledError",
    "TrainingError",
    "VoxFXError",
    "apply_basic",
    "get_effect",
    "list_effects",
    "modulate",
    "resample",
]
