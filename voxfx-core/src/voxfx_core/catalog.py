"""Effect catalog: the fixed table of selectable voice effects."""

from __future__ import annotations

from voxfx_core.errors import ConfigurationError
from voxfx_core.types import (
    Age,
    EffectCategory,
    Emotion,
    Gender,
    VoiceCharacteristics,
    VoiceEffectSpec,
)

_BASIC = EffectCategory.BASIC
_CLONED = EffectCategory.CLONED

_EFFECTS: tuple[VoiceEffectSpec, ...] = (
    # Basic pitch/speed presets
    VoiceEffectSpec("none", "原声", 1.0, 1.0, _BASIC),
    VoiceEffectSpec("male", "男声", 0.8, 0.95, _BASIC),
    VoiceEffectSpec("female", "女声", 1.3, 1.05, _BASIC),
    VoiceEffectSpec("child", "儿童声", 1.5, 1.1, _BASIC),
    VoiceEffectSpec("robot", "机器人", 1.0, 1.0, _BASIC),
    VoiceEffectSpec("monster", "怪物", 0.6, 0.9, _BASIC),
    VoiceEffectSpec("alien", "外星人", 1.8, 1.15, _BASIC),
    VoiceEffectSpec("deep", "低沉", 0.7, 0.92, _BASIC),
    VoiceEffectSpec("chipmunk", "花栗鼠", 1.6, 1.2, _BASIC),
    # Character voices
    VoiceEffectSpec(
        "lazy_cat", "懒洋洋", 0.85, 0.8, _CLONED,
        VoiceCharacteristics(Emotion.LAZY, Gender.MALE, Age.ADULT),
    ),
    VoiceEffectSpec(
        "spongebob", "海绵宝宝", 1.4, 1.25, _CLONED,
        VoiceCharacteristics(Emotion.EXCITED, Gender.MALE, Age.YOUNG_ADULT),
    ),
    VoiceEffectSpec(
        "porky_pig", "猪猪侠", 0.9, 1.1, _CLONED,
        VoiceCharacteristics(Emotion.CHEERFUL, Gender.MALE, Age.CHILD),
    ),
    VoiceEffectSpec(
        "elsa", "艾莎公主", 1.35, 1.05, _CLONED,
        VoiceCharacteristics(Emotion.ELEGANT, Gender.FEMALE, Age.YOUNG_ADULT),
    ),
    VoiceEffectSpec(
        "optimus_prime", "擎天柱", 0.65, 0.85, _CLONED,
        VoiceCharacteristics(Emotion.AUTHORITATIVE, Gender.MALE, Age.ADULT),
    ),
    VoiceEffectSpec(
        "minion", "小黄人", 1.6, 1.3, _CLONED,
        VoiceCharacteristics(Emotion.PLAYFUL, Gender.NEUTRAL, Age.CHILD),
    ),
    # Characteristics come from a CustomVoiceModel at call time
    VoiceEffectSpec("custom", "自定义", 1.0, 1.0, EffectCategory.CUSTOM),
)

EFFECT_TABLE: dict[str, VoiceEffectSpec] = {e.id: e for e in _EFFECTS}

IDENTITY = EFFECT_TABLE["none"]
ROBOT = EFFECT_TABLE["robot"]
CUSTOM = EFFECT_TABLE["custom"]


def get_effect(effect_id: str) -> VoiceEffectSpec:
    """Look up an effect by id.

    Raises:
        ConfigurationError: If ``effect_id`` is not in the catalog.
    """
    try:
        return EFFECT_TABLE[effect_id]
    except KeyError:
        raise ConfigurationError(
            f"Unknown effect: {effect_id!r}. Available: {list(EFFECT_TABLE)}"
        ) from None


def list_effects(category: EffectCategory | None = None) -> list[VoiceEffectSpec]:
    """All effects in declaration order, optionally filtered by category."""
    if category is None:
        return list(_EFFECTS)
    return [e for e in _EFFECTS if e.category == category]
