"""Tests for the effect catalog and catalog types."""

from __future__ import annotations

import pytest

from voxfx_core.catalog import CUSTOM, EFFECT_TABLE, get_effect, list_effects
from voxfx_core.errors import ConfigurationError
from voxfx_core.types import (
    Age,
    EffectCategory,
    Emotion,
    Gender,
    VoiceCharacteristics,
    VoiceEffectSpec,
)


class TestCatalog:
    def test_size_and_order(self):
        ids = [e.id for e in list_effects()]
        assert len(ids) == 16
        assert ids[0] == "none"
        assert ids[-1] == "custom"
        assert len(set(ids)) == len(ids)

    @pytest.mark.parametrize(
        "effect_id, pitch, speed",
        [
            ("none", 1.0, 1.0),
            ("male", 0.8, 0.95),
            ("female", 1.3, 1.05),
            ("child", 1.5, 1.1),
            ("robot", 1.0, 1.0),
            ("monster", 0.6, 0.9),
            ("alien", 1.8, 1.15),
            ("deep", 0.7, 0.92),
            ("chipmunk", 1.6, 1.2),
            ("lazy_cat", 0.85, 0.8),
            ("spongebob", 1.4, 1.25),
            ("porky_pig", 0.9, 1.1),
            ("elsa", 1.35, 1.05),
            ("optimus_prime", 0.65, 0.85),
            ("minion", 1.6, 1.3),
        ],
    )
    def test_ratios(self, effect_id, pitch, speed):
        spec = get_effect(effect_id)
        assert spec.pitch_shift == pitch
        assert spec.speed_multiplier == speed

    def test_categories(self):
        assert len(list_effects(EffectCategory.BASIC)) == 9
        assert len(list_effects(EffectCategory.CLONED)) == 6
        assert list_effects(EffectCategory.CUSTOM) == [CUSTOM]

    def test_cloned_effects_have_characteristics(self):
        for spec in list_effects(EffectCategory.CLONED):
            assert spec.characteristics is not None
        for spec in list_effects(EffectCategory.BASIC):
            assert spec.characteristics is None

    def test_elsa_characteristics(self):
        chars = get_effect("elsa").characteristics
        assert chars == VoiceCharacteristics(Emotion.ELEGANT, Gender.FEMALE, Age.YOUNG_ADULT)

    def test_unknown_effect(self):
        with pytest.raises(ConfigurationError, match="Unknown effect"):
            get_effect("pirate")

    def test_unknown_effect_is_lookup_error(self):
        with pytest.raises(LookupError):
            get_effect("")

    def test_table_matches_list(self):
        assert list(EFFECT_TABLE.values()) == list_effects()


class TestTypes:
    def test_spec_rejects_non_positive_ratio(self):
        with pytest.raises(ValueError):
            VoiceEffectSpec("bad", "bad", 0.0, 1.0)
        with pytest.raises(ValueError):
            VoiceEffectSpec("bad", "bad", 1.0, -2.0)

    def test_characteristics_validation(self):
        with pytest.raises(ValueError):
            VoiceCharacteristics(Emotion.HAPPY, Gender.MALE, Age.ADULT, pitch_range=(2.0, 1.0))
        with pytest.raises(ValueError):
            VoiceCharacteristics(Emotion.HAPPY, Gender.MALE, Age.ADULT, formant_shift=0.0)

    def test_characteristics_dict_roundtrip(self):
        chars = VoiceCharacteristics(
            Emotion.PLAYFUL, Gender.NEUTRAL, Age.CHILD, accent="fr", pitch_range=(0.7, 1.4),
        )
        d = chars.to_dict()
        assert d["emotion"] == "playful"
        assert d["age"] == "child"
        assert VoiceCharacteristics.from_dict(d) == chars

    def test_emotion_count(self):
        assert len(Emotion) == 10
