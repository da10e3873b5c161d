"""VoiceCloningManager: single-flight custom voice training backed by a registry."""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor

from voxfx_core.errors import TrainingError
from voxfx_core.types import CustomVoiceModel, TrainingProgress, VoiceCharacteristics
from voxfx_export.registry import ModelRegistry

from voxfx_train.trainer import VoiceModelTrainer

logger = logging.getLogger(__name__)


class VoiceCloningManager:
    """Train custom voices one at a time and store them under a caller name.

    Registry reads (:meth:`list_models`, :meth:`get_model`) never wait for
    a running training job.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        trainer: VoiceModelTrainer | None = None,
        max_workers: int = 1,
    ) -> None:
        self.registry = registry
        self.trainer = trainer or VoiceModelTrainer()
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="voxfx-train",
        )
        self._lock = threading.Lock()
        self._cancel_event: threading.Event | None = None

    @property
    def is_training(self) -> bool:
        with self._lock:
            return self._cancel_event is not None

    def _acquire(self) -> threading.Event:
        with self._lock:
            if self._cancel_event is not None:
                raise TrainingError("A training job is already running")
            self._cancel_event = threading.Event()
            return self._cancel_event

    def _release(self) -> None:
        with self._lock:
            self._cancel_event = None

    def _run(
        self,
        cancel_event: threading.Event,
        name: str,
        samples: list[bytes],
        characteristics: VoiceCharacteristics,
        on_progress: Callable[[TrainingProgress], None] | None,
    ) -> CustomVoiceModel:
        try:
            model = self.trainer.train(
                samples, characteristics,
                on_progress=on_progress, cancel_event=cancel_event,
            )
            model = dataclasses.replace(model, id=name)
            self.registry.create(model)
        finally:
            self._release()
        logger.info("Stored custom voice %r (%d samples)", name, model.training_sample_count)
        return model

    def train(
        self,
        name: str,
        samples: list[bytes],
        characteristics: VoiceCharacteristics,
        on_progress: Callable[[TrainingProgress], None] | None = None,
    ) -> CustomVoiceModel:
        """Train synchronously and store the model with ``id == name``.

        Raises:
            TrainingError: If training fails or another job is running.
        """
        cancel_event = self._acquire()
        return self._run(cancel_event, name, samples, characteristics, on_progress)

    def submit(
        self,
        name: str,
        samples: list[bytes],
        characteristics: VoiceCharacteristics,
        on_progress: Callable[[TrainingProgress], None] | None = None,
    ) -> Future:
        """Like :meth:`train`, but on a worker thread.

        The busy check happens here, so a rejected request raises
        immediately rather than through the future.
        """
        cancel_event = self._acquire()
        try:
            return self._pool.submit(
                self._run, cancel_event, name, samples, characteristics, on_progress,
            )
        except RuntimeError:
            self._release()
            raise

    def cancel(self) -> bool:
        """Request cancellation of the active job. Returns False if idle."""
        with self._lock:
            if self._cancel_event is None:
                return False
            self._cancel_event.set()
        logger.info("Training cancellation requested")
        return True

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def list_models(self) -> list[CustomVoiceModel]:
        return self.registry.list()

    def get_model(self, model_id: str) -> CustomVoiceModel | None:
        return self.registry.get(model_id)

    def delete_model(self, model_id: str) -> bool:
        return self.registry.delete(model_id)
