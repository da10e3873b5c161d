"""Voice feature extraction: pitch, formants, spectral shape, prosody and MFCC."""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field

import numpy as np
import torch

from voxfx_core import pcm
from voxfx_core.audio import compute_mfcc, compute_stft
from voxfx_core.constants import (
    DEFAULT_FORMANTS_HZ,
    DEFAULT_PITCH_HZ,
    F0_MAX,
    F0_MIN,
    FORMANT_FRAMES,
    FORMANT_MAX_BANDWIDTH_HZ,
    FORMANT_MIN_HZ,
    HOP_LENGTH,
    MIN_SPEAKING_RATE,
    N_ENVELOPE_BANDS,
    N_FORMANTS,
    N_MFCC,
    SAMPLE_RATE,
    SYLLABLE_THRESHOLD,
    TILT_FMIN,
    VOICING_THRESHOLD,
    WINDOW_LENGTH,
)
from voxfx_core.types import VoiceFeatureSet

logger = logging.getLogger(__name__)


@dataclass
class ExtractorConfig:
    """Analysis parameters for :class:`VoiceFeatureExtractor`."""

    sample_rate: int = SAMPLE_RATE
    frame_length: int = WINDOW_LENGTH
    hop_length: int = HOP_LENGTH
    f0_min: float = F0_MIN
    f0_max: float = F0_MAX
    voicing_threshold: float = VOICING_THRESHOLD
    default_pitch_hz: float = DEFAULT_PITCH_HZ
    n_formants: int = N_FORMANTS
    default_formants_hz: list[float] = field(
        default_factory=lambda: list(DEFAULT_FORMANTS_HZ)
    )
    formant_min_hz: float = FORMANT_MIN_HZ
    formant_max_bandwidth_hz: float = FORMANT_MAX_BANDWIDTH_HZ
    formant_frames: int = FORMANT_FRAMES
    lpc_order: int | None = None  # None → 2 + sample_rate / 1000
    n_envelope_bands: int = N_ENVELOPE_BANDS
    n_mfcc: int = N_MFCC
    tilt_fmin: float = TILT_FMIN
    syllable_threshold: float = SYLLABLE_THRESHOLD
    min_speaking_rate: float = MIN_SPEAKING_RATE


# ============================================================================
# Framing helpers
# ============================================================================


def frame_signal(audio: np.ndarray, frame_length: int, hop_length: int) -> np.ndarray:
    """Split ``audio`` into overlapping frames.

    Audio shorter than one frame is zero-padded to a single frame.

    Returns:
        ``[n_frames, frame_length]`` view (or copy when padded).
    """
    if audio.shape[0] < frame_length:
        audio = np.pad(audio, (0, frame_length - audio.shape[0]))
    windows = np.lib.stride_tricks.sliding_window_view(audio, frame_length)
    return windows[::hop_length]


# ============================================================================
# F0 extraction
# ============================================================================


class F0Extractor(abc.ABC):
    """Abstract base for F0 extractors (pluggable design)."""

    @abc.abstractmethod
    def extract(self, frames: np.ndarray, sample_rate: int) -> np.ndarray:
        """Estimate F0 per frame.

        Args:
            frames: ``[n_frames, frame_length]`` float audio.
            sample_rate: Audio sample rate.

        Returns:
            ``[n_frames]`` F0 in Hz, 0.0 for unvoiced frames.
        """
        ...


class AutocorrelationF0Extractor(F0Extractor):
    """F0 from the normalized autocorrelation peak of each frame.

    The autocorrelation is computed through the FFT. The peak search starts
    after the first zero crossing so the main lobe around lag 0 is never
    picked, and the peak lag is refined by parabolic interpolation.
    """

    def __init__(
        self,
        f0_min: float = F0_MIN,
        f0_max: float = F0_MAX,
        voicing_threshold: float = VOICING_THRESHOLD,
        silence_rms: float = 1e-4,
    ) -> None:
        self.f0_min = f0_min
        self.f0_max = f0_max
        self.voicing_threshold = voicing_threshold
        self.silence_rms = silence_rms

    def extract(self, frames: np.ndarray, sample_rate: int) -> np.ndarray:
        n_frames, frame_length = frames.shape
        f0 = np.zeros(n_frames, dtype=np.float64)
        if n_frames == 0:
            return f0

        centered = frames - frames.mean(axis=1, keepdims=True)
        rms = np.sqrt(np.mean(centered**2, axis=1))

        n_fft = 1 << int(np.ceil(np.log2(2 * frame_length)))
        spec = np.fft.rfft(centered, n=n_fft, axis=1)
        corr = np.fft.irfft(np.abs(spec) ** 2, n=n_fft, axis=1)[:, :frame_length]

        min_lag = max(1, int(sample_rate / self.f0_max))
        max_lag = min(int(sample_rate / self.f0_min), frame_length - 2)
        if max_lag <= min_lag:
            return f0

        for i in range(n_frames):
            if rms[i] < self.silence_rms or corr[i, 0] <= 0:
                continue
            ac = corr[i] / corr[i, 0]

            below = np.nonzero(ac[: max_lag + 1] < 0)[0]
            if below.size == 0:
                continue
            start = max(min_lag, int(below[0]))
            if start >= max_lag:
                continue

            search = ac[start : max_lag + 1]
            peak = int(np.argmax(search)) + start
            if ac[peak] <= self.voicing_threshold:
                continue

            lag = float(peak)
            if 0 < peak < frame_length - 1:
                y0, y1, y2 = ac[peak - 1], ac[peak], ac[peak + 1]
                denom = y0 - 2.0 * y1 + y2
                if denom != 0:
                    lag += 0.5 * (y0 - y2) / denom
            f0[i] = sample_rate / lag

        return f0


def create_f0_extractor(method: str = "autocorr", **kwargs) -> F0Extractor:
    """Factory for F0 extractors.

    Args:
        method: ``"autocorr"``.
    """
    if method == "autocorr":
        return AutocorrelationF0Extractor(**kwargs)
    raise ValueError(f"Unknown F0 method: {method!r}")


# ============================================================================
# Formants (LPC)
# ============================================================================


def levinson_durbin(r: np.ndarray, order: int) -> np.ndarray | None:
    """Solve the LPC normal equations for autocorrelation ``r``.

    Returns:
        ``[order + 1]`` predictor polynomial with ``a[0] == 1``, or ``None``
        when ``r[0]`` is zero.
    """
    if r[0] <= 0:
        return None
    a = np.zeros(order + 1, dtype=np.float64)
    a[0] = 1.0
    err = r[0]
    for i in range(1, order + 1):
        acc = r[i] + np.dot(a[1:i], r[i - 1 : 0 : -1])
        k = -acc / err
        prev = a.copy()
        a[1:i] = prev[1:i] + k * prev[i - 1 : 0 : -1]
        a[i] = k
        err *= 1.0 - k * k
        if err <= 0:
            break
    return a


def lpc_formants(
    frame: np.ndarray,
    sample_rate: int,
    order: int,
    min_hz: float = FORMANT_MIN_HZ,
    max_bandwidth_hz: float = FORMANT_MAX_BANDWIDTH_HZ,
) -> list[float]:
    """Formant candidates of one frame from the roots of its LPC polynomial.

    Returns:
        Ascending resonance frequencies in Hz.
    """
    emphasized = np.append(frame[0], frame[1:] - 0.97 * frame[:-1])
    windowed = emphasized * np.hamming(emphasized.shape[0])
    n = windowed.shape[0]
    if n <= order:
        return []
    r = np.array([np.dot(windowed[: n - k], windowed[k:]) for k in range(order + 1)])
    r[0] *= 1.0 + 1e-6  # white-noise correction

    a = levinson_durbin(r, order)
    if a is None or not np.all(np.isfinite(a)):
        return []

    roots = np.roots(a)
    roots = roots[np.imag(roots) > 0]
    freqs = np.angle(roots) * sample_rate / (2.0 * np.pi)
    bandwidths = -0.5 * (sample_rate / (2.0 * np.pi)) * np.log(np.abs(roots))

    keep = (freqs > min_hz) & (bandwidths < max_bandwidth_hz)
    return sorted(float(f) for f in freqs[keep])


# ============================================================================
# Extractor
# ============================================================================


class VoiceFeatureExtractor:
    """Derive a :class:`VoiceFeatureSet` from a PCM buffer.

    Every estimator is deterministic: the same buffer always yields the
    same features.
    """

    def __init__(
        self,
        config: ExtractorConfig | None = None,
        f0_extractor: F0Extractor | None = None,
    ) -> None:
        self.config = config or ExtractorConfig()
        self.f0_extractor = f0_extractor or AutocorrelationF0Extractor(
            f0_min=self.config.f0_min,
            f0_max=self.config.f0_max,
            voicing_threshold=self.config.voicing_threshold,
        )

    def extract(self, data: bytes, sample_rate: int | None = None) -> VoiceFeatureSet:
        """Extract features from 16-bit LE mono PCM.

        Raises:
            InvalidBufferError: If ``data`` has an odd length.
        """
        return self.extract_samples(pcm.decode(data), sample_rate)

    def extract_samples(
        self,
        samples: np.ndarray,
        sample_rate: int | None = None,
    ) -> VoiceFeatureSet:
        """Extract features from int16 samples."""
        cfg = self.config
        sr = sample_rate or cfg.sample_rate

        if samples.shape[0] == 0:
            logger.debug("Empty buffer, returning default features")
            return self._default_features()

        audio = pcm.to_float(samples).astype(np.float64)
        frames = frame_signal(audio, cfg.frame_length, cfg.hop_length)

        f0 = self.f0_extractor.extract(frames, sr)
        voiced = f0 > 0
        pitch = float(np.median(f0[voiced])) if voiced.any() else cfg.default_pitch_hz
        if not voiced.any():
            logger.debug("No voiced frames, using default pitch %.1f Hz", pitch)

        frame_rms = np.sqrt(np.mean(frames**2, axis=1))
        magnitude = self._mean_magnitude(audio)

        return VoiceFeatureSet(
            pitch=pitch,
            formants=self._formants(frames, frame_rms, voiced, sr),
            spectral_envelope=self._spectral_envelope(magnitude),
            energy=float(np.mean(samples.astype(np.float64) ** 2)),
            jitter=_relative_perturbation(1.0 / f0[voiced]) if voiced.any() else 0.0,
            shimmer=_relative_perturbation(frame_rms[voiced]),
            spectral_tilt=self._spectral_tilt(magnitude, sr),
            speaking_rate=self._speaking_rate(audio, sr),
            mfcc=self._mfcc(audio, sr),
        )

    # ------------------------------------------------------------------
    # Individual estimators
    # ------------------------------------------------------------------

    def _default_features(self) -> VoiceFeatureSet:
        cfg = self.config
        return VoiceFeatureSet(
            pitch=cfg.default_pitch_hz,
            formants=list(cfg.default_formants_hz[: cfg.n_formants]),
            spectral_envelope=np.zeros(cfg.n_envelope_bands, dtype=np.float32),
            energy=0.0,
            jitter=0.0,
            shimmer=0.0,
            spectral_tilt=0.0,
            speaking_rate=cfg.min_speaking_rate,
            mfcc=np.zeros(cfg.n_mfcc, dtype=np.float32),
        )

    def _formants(
        self,
        frames: np.ndarray,
        frame_rms: np.ndarray,
        voiced: np.ndarray,
        sample_rate: int,
    ) -> list[float]:
        cfg = self.config
        order = cfg.lpc_order or 2 + sample_rate // 1000

        # Analyse the loudest frames, voiced ones first
        candidates = np.nonzero(voiced)[0] if voiced.any() else np.arange(frames.shape[0])
        candidates = candidates[frame_rms[candidates] > 0]
        loudest = candidates[np.argsort(frame_rms[candidates])[::-1][: cfg.formant_frames]]

        per_slot: list[list[float]] = [[] for _ in range(cfg.n_formants)]
        for idx in loudest:
            found = lpc_formants(
                frames[idx],
                sample_rate,
                order,
                min_hz=cfg.formant_min_hz,
                max_bandwidth_hz=cfg.formant_max_bandwidth_hz,
            )
            for slot, freq in enumerate(found[: cfg.n_formants]):
                per_slot[slot].append(freq)

        formants = [
            float(np.median(values)) if values else float(cfg.default_formants_hz[slot])
            for slot, values in enumerate(per_slot)
        ]
        return sorted(formants)

    def _mean_magnitude(self, audio: np.ndarray) -> np.ndarray:
        waveform = torch.from_numpy(audio.astype(np.float32)).unsqueeze(0)
        mag = compute_stft(waveform)  # [1, n_freq, T]
        return mag.mean(dim=-1).squeeze(0).numpy().astype(np.float64)

    def _spectral_envelope(self, magnitude: np.ndarray) -> np.ndarray:
        bands = np.array_split(magnitude[1:], self.config.n_envelope_bands)
        envelope = np.array([b.mean() if b.size else 0.0 for b in bands])
        peak = envelope.max()
        if peak > 0:
            envelope = envelope / peak
        return envelope.astype(np.float32)

    def _spectral_tilt(self, magnitude: np.ndarray, sample_rate: int) -> float:
        power = magnitude**2
        freqs = np.linspace(0.0, sample_rate / 2.0, power.shape[0])
        mask = (freqs >= self.config.tilt_fmin) & (power > 1e-12)
        if mask.sum() < 2:
            return 0.0
        slope, _ = np.polyfit(np.log10(freqs[mask]), 10.0 * np.log10(power[mask]), 1)
        return float(slope)

    def _speaking_rate(self, audio: np.ndarray, sample_rate: int) -> float:
        # Syllable proxy: onsets of the 25 ms / 10 ms RMS envelope
        frame_len = max(1, int(sample_rate * 0.025))
        hop = max(1, int(sample_rate * 0.010))
        rms = np.sqrt(np.mean(frame_signal(audio, frame_len, hop) ** 2, axis=1))

        peak = rms.max()
        if peak <= 1e-8:
            return self.config.min_speaking_rate
        above = rms / peak > self.config.syllable_threshold
        onsets = int(above[0]) + int(np.sum(above[1:] & ~above[:-1]))

        duration_sec = audio.shape[0] / sample_rate
        rate = onsets / max(duration_sec, 0.1)
        return float(max(rate, self.config.min_speaking_rate))

    def _mfcc(self, audio: np.ndarray, sample_rate: int) -> np.ndarray:
        waveform = torch.from_numpy(audio.astype(np.float32)).unsqueeze(0)
        mfcc = compute_mfcc(waveform, sample_rate=sample_rate, n_mfcc=self.config.n_mfcc)
        return mfcc.squeeze(0).numpy().astype(np.float32)


def _relative_perturbation(values: np.ndarray) -> float:
    """Mean absolute consecutive difference divided by the mean value."""
    if values.shape[0] < 2:
        return 0.0
    mean = float(np.mean(values))
    if mean <= 0:
        return 0.0
    return float(np.mean(np.abs(np.diff(values))) / mean)
