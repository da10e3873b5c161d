"""Custom voice model binary formats: the model payload and the .voxmodel file."""

from __future__ import annotations

import hashlib
import json
import logging
import struct
from pathlib import Path

import numpy as np

from voxfx_core.types import CustomVoiceModel, VoiceCharacteristics

logger = logging.getLogger(__name__)

CHECKSUM_SIZE = 32
MODEL_FILE_SUFFIX = ".voxmodel"

# Payload layout (CustomVoiceModel.model_payload):
#   Magic: 4 bytes "VXMP"
#   Version: uint32_le = 1
#   header_size: uint32_le (JSON UTF-8 byte count)
#   header_json: {"scalars": {name: float}, "vectors": [[name, length], ...]}
#   vectors: float32 data, concatenated in header order
#   checksum: SHA-256 = 32 bytes

PAYLOAD_MAGIC = b"VXMP"
PAYLOAD_VERSION = 1
PAYLOAD_HEADER_SIZE = 12  # magic(4) + version(4) + header_size(4)

# Model file layout (.voxmodel):
#   Magic: 4 bytes "VXMF"
#   Version: uint32_le = 1
#   metadata_size: uint32_le (JSON UTF-8 byte count)
#   payload_size: uint32_le
#   metadata_json: id, characteristics, training_sample_count, created_at
#   payload: raw model_payload bytes
#   checksum: SHA-256 = 32 bytes

FILE_MAGIC = b"VXMF"
FILE_VERSION = 1
FILE_HEADER_SIZE = 16  # magic(4) + version(4) + meta_size(4) + payload_size(4)


def _verify(data: bytes, magic: bytes, version: int, header_size: int) -> None:
    min_size = header_size + CHECKSUM_SIZE
    if len(data) < min_size:
        raise ValueError(f"Invalid size: expected at least {min_size}, got {len(data)}")
    if data[:4] != magic:
        raise ValueError(f"Invalid magic: expected {magic!r}, got {data[:4]!r}")
    found = struct.unpack("<I", data[4:8])[0]
    if found != version:
        raise ValueError(f"Unsupported version: {found}")
    if hashlib.sha256(data[:-CHECKSUM_SIZE]).digest() != data[-CHECKSUM_SIZE:]:
        raise ValueError("Checksum mismatch: data is corrupted")


def pack_model_payload(stats: dict) -> bytes:
    """Serialize aggregated feature statistics.

    Args:
        stats: Mapping of name to a float (stored in the JSON header) or a
            1-D array-like (stored as float32).

    Returns:
        Payload bytes suitable for ``CustomVoiceModel.model_payload``.
    """
    scalars: dict[str, float] = {}
    vectors: list[tuple[str, np.ndarray]] = []
    for name, value in stats.items():
        if np.ndim(value) == 0:
            scalars[name] = float(value)
        else:
            vectors.append((name, np.asarray(value, dtype=np.float32).ravel()))

    header = {
        "scalars": scalars,
        "vectors": [[name, int(vec.shape[0])] for name, vec in vectors],
    }
    header_bytes = json.dumps(header).encode("utf-8")

    data = bytearray()
    data += PAYLOAD_MAGIC
    data += struct.pack("<I", PAYLOAD_VERSION)
    data += struct.pack("<I", len(header_bytes))
    data += header_bytes
    for _, vec in vectors:
        data += vec.astype("<f4").tobytes()
    data += hashlib.sha256(bytes(data)).digest()
    return bytes(data)


def unpack_model_payload(payload: bytes) -> dict:
    """Inverse of :func:`pack_model_payload`.

    Returns:
        Dict of floats and float32 arrays.

    Raises:
        ValueError: If the payload is invalid or corrupted.
    """
    _verify(payload, PAYLOAD_MAGIC, PAYLOAD_VERSION, PAYLOAD_HEADER_SIZE)

    header_size = struct.unpack("<I", payload[8:12])[0]
    offset = PAYLOAD_HEADER_SIZE + header_size
    try:
        header = json.loads(payload[PAYLOAD_HEADER_SIZE:offset])
        vector_specs = [(str(name), int(length)) for name, length in header["vectors"]]
        stats: dict = {k: float(v) for k, v in header["scalars"].items()}
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid payload header: {exc}") from exc

    expected = offset + 4 * sum(n for _, n in vector_specs) + CHECKSUM_SIZE
    if len(payload) != expected:
        raise ValueError(f"Payload size mismatch: expected {expected}, got {len(payload)}")

    for name, length in vector_specs:
        stats[name] = np.frombuffer(
            payload[offset:offset + 4 * length], dtype="<f4",
        ).astype(np.float32)
        offset += 4 * length
    return stats


def write_model_file(output_path: str | Path, model: CustomVoiceModel) -> Path:
    """Write a custom voice model to a .voxmodel file.

    Returns:
        Path to the written file.
    """
    output_path = Path(output_path)
    meta = {
        "id": model.id,
        "characteristics": model.characteristics.to_dict(),
        "training_sample_count": model.training_sample_count,
        "created_at": model.created_at,
    }
    metadata_bytes = json.dumps(meta, ensure_ascii=False).encode("utf-8")

    data = bytearray()
    data += FILE_MAGIC
    data += struct.pack("<I", FILE_VERSION)
    data += struct.pack("<I", len(metadata_bytes))
    data += struct.pack("<I", len(model.model_payload))
    data += metadata_bytes
    data += model.model_payload
    data += hashlib.sha256(bytes(data)).digest()

    output_path.write_bytes(bytes(data))
    logger.info("Wrote model file to %s (%d bytes)", output_path, len(data))
    return output_path


def read_model_file(path: str | Path) -> CustomVoiceModel:
    """Read and validate a .voxmodel file.

    Raises:
        ValueError: If the file is invalid or corrupted.
    """
    data = Path(path).read_bytes()
    _verify(data, FILE_MAGIC, FILE_VERSION, FILE_HEADER_SIZE)

    metadata_size = struct.unpack("<I", data[8:12])[0]
    payload_size = struct.unpack("<I", data[12:16])[0]
    expected_size = FILE_HEADER_SIZE + metadata_size + payload_size + CHECKSUM_SIZE
    if len(data) != expected_size:
        raise ValueError(f"File size mismatch: expected {expected_size}, got {len(data)}")

    meta_offset = FILE_HEADER_SIZE
    payload_offset = meta_offset + metadata_size
    try:
        meta = json.loads(data[meta_offset:payload_offset])
        return CustomVoiceModel(
            id=str(meta["id"]),
            characteristics=VoiceCharacteristics.from_dict(meta["characteristics"]),
            model_payload=bytes(data[payload_offset:payload_offset + payload_size]),
            training_sample_count=int(meta["training_sample_count"]),
            created_at=int(meta["created_at"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid model metadata: {exc}") from exc
