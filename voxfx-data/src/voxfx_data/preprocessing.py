"""Audio file I/O: load any soundfile-readable file as 16-bit mono PCM and write WAV."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import soundfile as sf
import torch
import torchaudio.functional as AF

from voxfx_core import pcm
from voxfx_core.constants import SAMPLE_RATE

logger = logging.getLogger(__name__)


def load_and_resample(
    path: str | Path,
    target_sr: int = SAMPLE_RATE,
) -> tuple[torch.Tensor, int]:
    """Load an audio file and resample to *target_sr*.

    Returns:
        ``(waveform, target_sr)`` where ``waveform`` is ``[1, T]`` float32.
    """
    data, sr = sf.read(str(path), dtype="float32")
    # soundfile returns [T] for mono, [T, C] for multi-channel
    waveform = torch.from_numpy(data)
    if waveform.dim() == 1:
        waveform = waveform.unsqueeze(0)  # [1, T]
    else:
        waveform = waveform.T  # [C, T]
    if waveform.shape[0] > 1:
        waveform = waveform.mean(dim=0, keepdim=True)
    if sr != target_sr:
        logger.debug("Resampling %s from %d Hz to %d Hz", path, sr, target_sr)
        waveform = AF.resample(waveform, sr, target_sr)
    return waveform, target_sr


def load_pcm(path: str | Path, target_sr: int = SAMPLE_RATE) -> tuple[bytes, int]:
    """Load an audio file as 16-bit LE mono PCM at *target_sr*.

    Returns:
        ``(pcm_bytes, target_sr)``.
    """
    waveform, sr = load_and_resample(path, target_sr)
    samples = pcm.from_float(waveform.squeeze(0).numpy())
    return pcm.encode(samples), sr


def save_pcm(path: str | Path, data: bytes, sample_rate: int = SAMPLE_RATE) -> Path:
    """Write 16-bit LE mono PCM to a WAV file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    samples = pcm.decode(data)
    sf.write(str(path), samples.astype(np.int16), sample_rate, subtype="PCM_16")
    logger.info(
        "Wrote %s (%d ms at %d Hz)", path, pcm.duration_ms(data, sample_rate), sample_rate
    )
    return path
