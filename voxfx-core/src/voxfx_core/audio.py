"""Spectral front end: STFT, HTK mel filterbank, log-mel and MFCC.

Uses torch.stft with causal (no center) padding and a hand-built HTK mel
filterbank so results do not depend on library-specific mel conventions.
"""

from __future__ import annotations

import math

import torch
import torch.nn.functional as F

from voxfx_core.constants import (
    HOP_LENGTH,
    LOG_FLOOR,
    MEL_FMAX,
    MEL_FMIN,
    N_FFT,
    N_MELS,
    N_MFCC,
    SAMPLE_RATE,
    WINDOW_LENGTH,
)


def _hz_to_mel(freq: float) -> float:
    """Convert Hz to HTK mel scale."""
    return 2595.0 * math.log10(1.0 + freq / 700.0)


def _mel_to_hz(mel: float) -> float:
    """Convert HTK mel scale to Hz."""
    return 700.0 * (10.0 ** (mel / 2595.0) - 1.0)


def create_mel_filterbank(
    n_fft: int = N_FFT,
    n_mels: int = N_MELS,
    sample_rate: int = SAMPLE_RATE,
    fmin: float = MEL_FMIN,
    fmax: float = MEL_FMAX,
) -> torch.Tensor:
    """Build an HTK mel filterbank from first principles.

    ``fmax`` is clipped to the Nyquist frequency of ``sample_rate``.

    Returns:
        Tensor of shape ``[n_mels, n_fft // 2 + 1]``.
    """
    n_freq = n_fft // 2 + 1
    fmax = min(fmax, sample_rate / 2.0)
    mel_low = _hz_to_mel(fmin)
    mel_high = _hz_to_mel(fmax)

    # Equally spaced mel points (n_mels + 2 edges)
    mel_points = torch.linspace(mel_low, mel_high, n_mels + 2)
    hz_points = 700.0 * (10.0 ** (mel_points / 2595.0) - 1.0)

    fft_freqs = torch.linspace(0.0, sample_rate / 2.0, n_freq)

    filterbank = torch.zeros(n_mels, n_freq)
    for i in range(n_mels):
        low = hz_points[i]
        center = hz_points[i + 1]
        high = hz_points[i + 2]

        up = (fft_freqs - low) / (center - low + 1e-10)
        down = (high - fft_freqs) / (high - center + 1e-10)

        filterbank[i] = torch.clamp(torch.minimum(up, down), min=0.0)

    return filterbank


def create_dct_matrix(n_mfcc: int = N_MFCC, n_mels: int = N_MELS) -> torch.Tensor:
    """Orthonormal DCT-II basis.

    Returns:
        Tensor of shape ``[n_mfcc, n_mels]``.
    """
    n = torch.arange(n_mels, dtype=torch.float64)
    k = torch.arange(n_mfcc, dtype=torch.float64).unsqueeze(1)
    basis = torch.cos(math.pi / n_mels * (n + 0.5) * k) * math.sqrt(2.0 / n_mels)
    basis[0] *= 1.0 / math.sqrt(2.0)
    return basis.float()


def _pad_to_window(waveform: torch.Tensor, n_fft: int, pad_length: int) -> torch.Tensor:
    # Causal left-padding, then right-pad buffers shorter than one FFT frame
    x = F.pad(waveform, (pad_length, 0))
    if x.shape[-1] < n_fft:
        x = F.pad(x, (0, n_fft - x.shape[-1]))
    return x


class MelSpectrogram(torch.nn.Module):
    """Causal log-mel spectrogram extractor with deterministic output.

    - ``torch.stft(center=False)`` with manual left-padding
    - Hann window (``periodic=True``)
    - HTK mel filterbank built from first principles
    - ``log(clamp(mel, min=1e-10))``
    """

    def __init__(
        self,
        n_fft: int = N_FFT,
        hop_length: int = HOP_LENGTH,
        window_length: int = WINDOW_LENGTH,
        n_mels: int = N_MELS,
        sample_rate: int = SAMPLE_RATE,
        fmin: float = MEL_FMIN,
        fmax: float = MEL_FMAX,
        log_floor: float = LOG_FLOOR,
    ) -> None:
        super().__init__()
        self.n_fft = n_fft
        self.hop_length = hop_length
        self.window_length = window_length
        self.n_mels = n_mels
        self.log_floor = log_floor
        self.pad_length = window_length - hop_length

        self.register_buffer(
            "window", torch.hann_window(window_length, periodic=True)
        )
        self.register_buffer(
            "mel_basis",
            create_mel_filterbank(n_fft, n_mels, sample_rate, fmin, fmax),
        )

    def forward(self, waveform: torch.Tensor) -> torch.Tensor:
        """Compute log-mel spectrogram.

        Args:
            waveform: ``[B, 1, T]`` or ``[B, T]`` float audio.

        Returns:
            ``[B, n_mels, T_frames]`` log-mel spectrogram.
        """
        if waveform.dim() == 3:
            waveform = waveform.squeeze(1)  # [B, T]

        x = _pad_to_window(waveform, self.n_fft, self.pad_length)

        stft = torch.stft(
            x,
            n_fft=self.n_fft,
            hop_length=self.hop_length,
            win_length=self.window_length,
            window=self.window,
            center=False,
            return_complex=True,
        )
        power = stft.abs().pow(2)  # [B, n_freq, T_frames]
        mel = torch.matmul(self.mel_basis.to(power.device), power)
        return mel.clamp(min=self.log_floor).log()


def compute_mel(
    waveform: torch.Tensor,
    sample_rate: int = SAMPLE_RATE,
    n_fft: int = N_FFT,
    hop_length: int = HOP_LENGTH,
    window_length: int = WINDOW_LENGTH,
    n_mels: int = N_MELS,
    fmin: float = MEL_FMIN,
    fmax: float = MEL_FMAX,
    log_floor: float = LOG_FLOOR,
) -> torch.Tensor:
    """Functional interface to compute log-mel spectrogram.

    Args:
        waveform: ``[B, 1, T]`` or ``[B, T]`` float audio.

    Returns:
        ``[B, n_mels, T_frames]`` log-mel spectrogram.
    """
    mel_fn = MelSpectrogram(
        n_fft=n_fft,
        hop_length=hop_length,
        window_length=window_length,
        n_mels=n_mels,
        sample_rate=sample_rate,
        fmin=fmin,
        fmax=fmax,
        log_floor=log_floor,
    )
    mel_fn.eval()
    with torch.no_grad():
        return mel_fn(waveform)


def compute_stft(
    waveform: torch.Tensor,
    n_fft: int = N_FFT,
    hop_length: int = HOP_LENGTH,
    window_length: int = WINDOW_LENGTH,
) -> torch.Tensor:
    """Compute causal STFT magnitude.

    Args:
        waveform: ``[B, T]`` float audio.

    Returns:
        ``[B, n_fft//2+1, T_frames]`` STFT magnitude (linear).
    """
    pad_length = window_length - hop_length
    x = _pad_to_window(waveform, n_fft, pad_length)
    window = torch.hann_window(window_length, periodic=True, device=waveform.device)
    stft = torch.stft(
        x,
        n_fft=n_fft,
        hop_length=hop_length,
        win_length=window_length,
        window=window,
        center=False,
        return_complex=True,
    )
    return stft.abs()


def compute_mfcc(
    waveform: torch.Tensor,
    sample_rate: int = SAMPLE_RATE,
    n_mfcc: int = N_MFCC,
    n_mels: int = N_MELS,
) -> torch.Tensor:
    """Utterance-level MFCC vector.

    The log-mel spectrogram is averaged over time before the DCT.

    Args:
        waveform: ``[B, T]`` float audio.

    Returns:
        ``[B, n_mfcc]`` cepstral coefficients.
    """
    log_mel = compute_mel(waveform, sample_rate=sample_rate, n_mels=n_mels)
    mean_log_mel = log_mel.mean(dim=-1)  # [B, n_mels]
    dct = create_dct_matrix(n_mfcc, n_mels).to(mean_log_mel.device)
    return mean_log_mel @ dct.T
