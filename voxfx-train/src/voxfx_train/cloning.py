"""AdvancedEffectPipeline: basic effects plus feature-based voice cloning.

Cloned and custom effects run extract → convert → synthesize; basic
effects are delegated to :func:`voxfx_core.effects.apply_basic`.
"""

from __future__ import annotations

import logging

from voxfx_core import pcm
from voxfx_core.catalog import get_effect
from voxfx_core.constants import SAMPLE_RATE
from voxfx_core.effects import apply_basic
from voxfx_core.types import CustomVoiceModel, EffectCategory, VoiceEffectSpec
from voxfx_data.features import VoiceFeatureExtractor

from voxfx_train.converter import FeatureTransformer
from voxfx_train.synthesizer import Synthesizer, SynthesizerConfig

logger = logging.getLogger(__name__)


class AdvancedEffectPipeline:
    """Apply any catalog effect to a PCM buffer.

    Args:
        extractor: Feature extractor (default: :class:`VoiceFeatureExtractor`).
        transformer: Feature converter (default: :class:`FeatureTransformer`).
        synthesizer: PCM synthesizer (default: one at ``sample_rate``).
        sample_rate: Sample rate of every buffer passed to :meth:`apply`.
        match_input_duration: Synthesize cloned output with the input's
            duration instead of the synthesizer's fixed default.
    """

    def __init__(
        self,
        extractor: VoiceFeatureExtractor | None = None,
        transformer: FeatureTransformer | None = None,
        synthesizer: Synthesizer | None = None,
        sample_rate: int = SAMPLE_RATE,
        match_input_duration: bool = False,
    ) -> None:
        self.extractor = extractor or VoiceFeatureExtractor()
        self.transformer = transformer or FeatureTransformer()
        self.synthesizer = synthesizer or Synthesizer(
            SynthesizerConfig(sample_rate=sample_rate)
        )
        self.sample_rate = sample_rate
        self.match_input_duration = match_input_duration

    def apply(
        self,
        data: bytes,
        spec: VoiceEffectSpec,
        custom_model: CustomVoiceModel | None = None,
    ) -> bytes:
        """Apply ``spec`` to 16-bit LE mono PCM.

        Raises:
            InvalidBufferError: If ``data`` has an odd length.
            InvalidParameterError: If a basic effect has invalid ratios.
        """
        if spec.category == EffectCategory.BASIC:
            return apply_basic(data, spec, self.sample_rate)

        if spec.category == EffectCategory.CLONED:
            if spec.characteristics is None:
                logger.warning("Cloned effect %r has no characteristics; passing through", spec.id)
                return data
            features = self.extractor.extract(data, self.sample_rate)
            converted = self.transformer.convert(
                features,
                spec.characteristics,
                spec.pitch_shift,
                spec.speed_multiplier,
            )
            return self.synthesizer.synthesize(converted, self._duration_for(data))

        # CUSTOM
        if custom_model is None:
            logger.debug("Custom effect without a model; passing through")
            return data
        features = self.extractor.extract(data, self.sample_rate)
        converted = self.transformer.convert_with_custom_model(features, custom_model)
        return self.synthesizer.synthesize(converted, self._duration_for(data))

    def apply_effect(
        self,
        data: bytes,
        effect_id: str,
        custom_model: CustomVoiceModel | None = None,
    ) -> bytes:
        """Look up ``effect_id`` in the catalog and apply it.

        Raises:
            ConfigurationError: If ``effect_id`` is not in the catalog.
        """
        return self.apply(data, get_effect(effect_id), custom_model)

    def _duration_for(self, data: bytes) -> float | None:
        if not self.match_input_duration:
            return None
        return pcm.decode(data).shape[0] / self.sample_rate
