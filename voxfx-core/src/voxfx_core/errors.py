"""Exception hierarchy shared by every VoxFX package."""

from __future__ import annotations


class VoxFXError(Exception):
    """Base class for all VoxFX errors."""


class InvalidBufferError(VoxFXError, ValueError):
    """A PCM byte buffer cannot be decoded (odd byte length)."""


class InvalidParameterError(VoxFXError, ValueError):
    """A numeric parameter is outside its valid domain."""


class ConfigurationError(VoxFXError, LookupError):
    """An effect identifier or configuration entry does not exist."""


class TrainingError(VoxFXError, RuntimeError):
    """Custom voice model training failed; no model was produced."""


class TrainingCancelledError(TrainingError):
    """Training was cancelled before it completed."""
