"""FeatureTransformer: steer a voice feature set towards a target voice.

Conversion runs four independent stages in a fixed order:
gender (formants) → age (pitch, spectral tilt) → emotion (prosody table)
→ pitch/speed ratios. Every stage returns a new feature set; inputs are
never mutated.
"""

from __future__ import annotations

import dataclasses
import logging

from voxfx_core.types import (
    Age,
    CustomVoiceModel,
    Emotion,
    Gender,
    VoiceCharacteristics,
    VoiceFeatureSet,
)

logger = logging.getLogger(__name__)

GENDER_FORMANT_FACTORS: dict[Gender, float] = {
    Gender.MALE: 0.85,
    Gender.FEMALE: 1.15,
    Gender.NEUTRAL: 1.0,
}

AGE_PITCH_FACTORS: dict[Age, float] = {
    Age.CHILD: 1.3,
    Age.TEENAGER: 1.1,
    Age.YOUNG_ADULT: 1.0,
    Age.ADULT: 0.95,
    Age.ELDERLY: 0.85,
}

# Multiplicative factors per VoiceFeatureSet field; absent fields are untouched
EMOTION_ADJUSTMENTS: dict[Emotion, dict[str, float]] = {
    Emotion.NEUTRAL: {},
    Emotion.HAPPY: {"pitch": 1.1, "energy": 1.2, "jitter": 0.8},
    Emotion.SAD: {"pitch": 0.9, "energy": 0.7, "speaking_rate": 0.8},
    Emotion.ANGRY: {"energy": 1.5, "pitch": 1.2, "jitter": 1.3},
    Emotion.EXCITED: {"pitch": 1.3, "energy": 1.4, "speaking_rate": 1.3},
    Emotion.LAZY: {"pitch": 0.85, "energy": 0.6, "speaking_rate": 0.7},
    Emotion.CHEERFUL: {"pitch": 1.15, "energy": 1.25, "jitter": 0.7},
    Emotion.ELEGANT: {"pitch": 1.05, "energy": 0.9, "jitter": 0.5},
    Emotion.AUTHORITATIVE: {"pitch": 0.9, "energy": 1.3, "spectral_tilt": 0.8},
    Emotion.PLAYFUL: {"pitch": 1.25, "energy": 1.3, "jitter": 1.2},
}


class FeatureTransformer:
    """Deterministic rule-based feature conversion."""

    def convert(
        self,
        features: VoiceFeatureSet,
        target: VoiceCharacteristics,
        pitch_shift: float,
        speed_multiplier: float,
    ) -> VoiceFeatureSet:
        """Convert ``features`` towards a preset voice."""
        out = self.apply_gender(features, target.gender)
        out = self.apply_age(out, target.age)
        out = self.apply_emotion(out, target.emotion)
        out = self.apply_pitch_and_speed(out, pitch_shift, speed_multiplier)
        logger.debug(
            "Converted pitch %.1f -> %.1f Hz (%s/%s/%s)",
            features.pitch,
            out.pitch,
            target.gender.value,
            target.age.value,
            target.emotion.value,
        )
        return out

    def convert_with_custom_model(
        self,
        features: VoiceFeatureSet,
        model: CustomVoiceModel,
    ) -> VoiceFeatureSet:
        """Convert ``features`` with a trained custom model's characteristics.

        Pitch is scaled by the upper bound of the model's pitch range and
        every formant by its formant shift.
        """
        chars = model.characteristics
        return dataclasses.replace(
            features,
            pitch=features.pitch * chars.pitch_range[1],
            formants=[f * chars.formant_shift for f in features.formants],
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    @staticmethod
    def apply_gender(features: VoiceFeatureSet, gender: Gender) -> VoiceFeatureSet:
        factor = GENDER_FORMANT_FACTORS[gender]
        return dataclasses.replace(
            features, formants=[f * factor for f in features.formants]
        )

    @staticmethod
    def apply_age(features: VoiceFeatureSet, age: Age) -> VoiceFeatureSet:
        factor = AGE_PITCH_FACTORS[age]
        return dataclasses.replace(
            features,
            pitch=features.pitch * factor,
            spectral_tilt=features.spectral_tilt * (2.0 - factor),
        )

    @staticmethod
    def apply_emotion(features: VoiceFeatureSet, emotion: Emotion) -> VoiceFeatureSet:
        adjustments = EMOTION_ADJUSTMENTS.get(emotion, {})
        changes = {name: getattr(features, name) * k for name, k in adjustments.items()}
        return dataclasses.replace(features, **changes)

    @staticmethod
    def apply_pitch_and_speed(
        features: VoiceFeatureSet,
        pitch_shift: float,
        speed_multiplier: float,
    ) -> VoiceFeatureSet:
        return dataclasses.replace(
            features,
            pitch=features.pitch * pitch_shift,
            speaking_rate=features.speaking_rate * speed_multiplier,
        )
