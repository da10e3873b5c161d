"""Custom voice model registries: in-memory and one-file-per-model on disk."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Protocol

from voxfx_core.types import CustomVoiceModel

from voxfx_export.model_file import MODEL_FILE_SUFFIX, read_model_file, write_model_file

logger = logging.getLogger(__name__)


class ModelRegistry(Protocol):
    """Storage for trained custom voice models, keyed by ``model.id``."""

    def create(self, model: CustomVoiceModel) -> None: ...

    def list(self) -> list[CustomVoiceModel]: ...

    def get(self, model_id: str) -> CustomVoiceModel | None: ...

    def delete(self, model_id: str) -> bool: ...


class InMemoryModelRegistry:
    """Thread-safe dict-backed registry; iteration follows insertion order."""

    def __init__(self) -> None:
        self._models: dict[str, CustomVoiceModel] = {}
        self._lock = threading.Lock()

    def create(self, model: CustomVoiceModel) -> None:
        with self._lock:
            self._models[model.id] = model

    def list(self) -> list[CustomVoiceModel]:
        with self._lock:
            return list(self._models.values())

    def get(self, model_id: str) -> CustomVoiceModel | None:
        with self._lock:
            return self._models.get(model_id)

    def delete(self, model_id: str) -> bool:
        with self._lock:
            return self._models.pop(model_id, None) is not None


class FileModelRegistry:
    """Registry storing each model as ``<directory>/<id>.voxmodel``."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, model_id: str) -> Path:
        if not model_id or "/" in model_id or "\\" in model_id or model_id in (".", ".."):
            raise ValueError(f"Invalid model id: {model_id!r}")
        return self.directory / f"{model_id}{MODEL_FILE_SUFFIX}"

    def create(self, model: CustomVoiceModel) -> None:
        path = self._path(model.id)
        with self._lock:
            write_model_file(path, model)

    def list(self) -> list[CustomVoiceModel]:
        with self._lock:
            paths = sorted(self.directory.glob(f"*{MODEL_FILE_SUFFIX}"))
            models = []
            for path in paths:
                try:
                    models.append(read_model_file(path))
                except ValueError as exc:
                    logger.warning("Skipping unreadable model file %s: %s", path, exc)
        return sorted(models, key=lambda m: m.created_at)

    def get(self, model_id: str) -> CustomVoiceModel | None:
        path = self._path(model_id)
        with self._lock:
            if not path.exists():
                return None
            return read_model_file(path)

    def delete(self, model_id: str) -> bool:
        path = self._path(model_id)
        with self._lock:
            if not path.exists():
                return False
            path.unlink()
        logger.info("Deleted model %s", model_id)
        return True
