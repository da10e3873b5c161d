"""Shared data types for the VoxFX pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np


class EffectCategory(str, enum.Enum):
    """Which pipeline an effect is routed through."""

    BASIC = "basic"  # pitch/speed resampling or modulation
    CLONED = "cloned"  # feature conversion towards a preset voice
    CUSTOM = "custom"  # feature conversion with a user-trained model


class Emotion(str, enum.Enum):
    NEUTRAL = "neutral"
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    EXCITED = "excited"
    LAZY = "lazy"
    CHEERFUL = "cheerful"
    ELEGANT = "elegant"
    AUTHORITATIVE = "authoritative"
    PLAYFUL = "playful"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    NEUTRAL = "neutral"


class Age(str, enum.Enum):
    CHILD = "child"
    TEENAGER = "teenager"
    YOUNG_ADULT = "young_adult"
    ADULT = "adult"
    ELDERLY = "elderly"


@dataclass(frozen=True)
class VoiceCharacteristics:
    """Target voice descriptor.

    Used both as the preset attached to a cloned effect and as the
    descriptor stored with a custom voice model.
    """

    emotion: Emotion
    gender: Gender
    age: Age
    accent: str | None = None
    pitch_range: tuple[float, float] = (0.5, 2.0)
    formant_shift: float = 1.0

    def __post_init__(self) -> None:
        lo, hi = self.pitch_range
        if lo > hi:
            raise ValueError(f"pitch_range must satisfy lo <= hi, got ({lo}, {hi})")
        if self.formant_shift <= 0:
            raise ValueError(f"formant_shift must be > 0, got {self.formant_shift}")

    def to_dict(self) -> dict:
        return {
            "emotion": self.emotion.value,
            "gender": self.gender.value,
            "age": self.age.value,
            "accent": self.accent,
            "pitch_range": [float(self.pitch_range[0]), float(self.pitch_range[1])],
            "formant_shift": float(self.formant_shift),
        }

    @classmethod
    def from_dict(cls, d: dict) -> VoiceCharacteristics:
        lo, hi = d.get("pitch_range", (0.5, 2.0))
        return cls(
            emotion=Emotion(d["emotion"]),
            gender=Gender(d["gender"]),
            age=Age(d["age"]),
            accent=d.get("accent"),
            pitch_range=(float(lo), float(hi)),
            formant_shift=float(d.get("formant_shift", 1.0)),
        )


@dataclass(frozen=True)
class VoiceEffectSpec:
    """A catalog entry: one selectable voice effect."""

    id: str
    display_name: str
    pitch_shift: float
    speed_multiplier: float
    category: EffectCategory = EffectCategory.BASIC
    characteristics: VoiceCharacteristics | None = None

    def __post_init__(self) -> None:
        if self.pitch_shift <= 0 or self.speed_multiplier <= 0:
            raise ValueError(
                f"Effect {self.id!r}: pitch_shift and speed_multiplier must be > 0"
            )


@dataclass
class VoiceFeatureSet:
    """Acoustic features of one buffer.

    Created and discarded within a single transformation call.
    """

    pitch: float  # Hz
    formants: list[float]  # Hz, ascending
    spectral_envelope: np.ndarray  # [n_envelope_bands], peak-normalized
    energy: float  # mean squared int16 sample value
    jitter: float  # relative period perturbation
    shimmer: float  # relative amplitude perturbation
    spectral_tilt: float  # dB/decade
    speaking_rate: float  # syllables/second
    mfcc: np.ndarray = field(default_factory=lambda: np.zeros(13, dtype=np.float32))


@dataclass(frozen=True)
class CustomVoiceModel:
    """A trained custom voice, referenced by ``id``.

    ``model_payload`` is opaque to everything except
    :mod:`voxfx_export.model_file`.
    """

    id: str
    characteristics: VoiceCharacteristics
    model_payload: bytes
    training_sample_count: int
    created_at: int  # milliseconds since the epoch


@dataclass(frozen=True)
class TrainingProgress:
    """One discrete progress event emitted during training."""

    progress: float  # 0.0 .. 1.0
    message: str
