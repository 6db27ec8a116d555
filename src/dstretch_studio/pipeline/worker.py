"""
Background execution of the enhancement pipeline.

A UI changing sliders produces bursts of requests for the same image.
PipelineWorker runs at most one pipeline at a time on a dedicated thread
and keeps at most one request waiting; a newer request replaces (and
cancels) the waiting one. A run that has started is never interrupted.
The buffer is copied on submit, so the caller may keep using its array.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import numpy as np

from dstretch_studio.config import get_settings
from dstretch_studio.core.buffer import as_pixel_buffer
from dstretch_studio.core.logging import get_logger
from dstretch_studio.core.models import ParameterSet
from dstretch_studio.pipeline.processor import EnhancementPipeline, ProcessingResult

logger = get_logger(__name__)


@dataclass
class _Request:
    buffer: np.ndarray
    params: Union[ParameterSet, dict[str, Any], None]
    future: Future = field(default_factory=Future)


class PipelineWorker:
    """Single-flight, latest-wins pipeline runner.

    Example:
        with PipelineWorker() as worker:
            future = worker.submit(pixels, ParameterSet(dstretch_enabled=True))
            result = future.result()
    """

    def __init__(
        self,
        pipeline: Optional[EnhancementPipeline] = None,
        debounce_seconds: Optional[float] = None,
    ):
        """Initialize the worker.

        Args:
            pipeline: Pipeline to run. If None, a default one is created.
            debounce_seconds: Quiet period before a run starts, during which
                newer requests replace the current one. Defaults to config.
        """
        self.pipeline = pipeline or EnhancementPipeline()
        if debounce_seconds is None:
            debounce_seconds = get_settings().worker.debounce_seconds
        self.debounce_seconds = debounce_seconds

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dstretch-pipeline")
        self._lock = threading.Lock()
        self._running = False
        self._closed = False
        self._pending: Optional[_Request] = None

    @property
    def busy(self) -> bool:
        """True while a run is in progress or queued."""
        with self._lock:
            return self._running

    def submit(
        self,
        buffer: np.ndarray,
        params: Union[ParameterSet, dict[str, Any], None] = None,
    ) -> "Future[ProcessingResult]":
        """Queue a pipeline run.

        Args:
            buffer: (H, W, 4) uint8 RGBA pixels (copied)
            params: Parameters for the run

        Returns:
            Future resolving to a ProcessingResult. It is cancelled if a
            newer request supersedes it before it starts.

        Raises:
            RuntimeError: If the worker has been closed
        """
        request = _Request(buffer=as_pixel_buffer(buffer), params=params)

        with self._lock:
            if self._closed:
                raise RuntimeError("PipelineWorker is closed")

            if self._running:
                if self._pending is not None:
                    self._pending.future.cancel()
                    logger.debug("Pending pipeline request superseded")
                self._pending = request
            else:
                self._running = True
                self._executor.submit(self._drain, request)

        return request.future

    def close(self, wait: bool = True) -> None:
        """Stop accepting requests, cancel the waiting one and shut down."""
        with self._lock:
            self._closed = True
            if self._pending is not None:
                self._pending.future.cancel()
                self._pending = None
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "PipelineWorker":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _drain(self, request: Optional[_Request]) -> None:
        while request is not None:
            request = self._debounce(request)
            self._run(request)

            with self._lock:
                request = self._pending
                self._pending = None
                if request is None:
                    self._running = False

    def _debounce(self, request: _Request) -> _Request:
        if self.debounce_seconds <= 0:
            return request

        while True:
            time.sleep(self.debounce_seconds)
            with self._lock:
                newer = self._pending
                self._pending = None
            if newer is None:
                return request
            request.future.cancel()
            request = newer

    def _run(self, request: _Request) -> None:
        if not request.future.set_running_or_notify_cancel():
            return
        try:
            result = self.pipeline.process(request.buffer, request.params)
        except Exception as e:
            logger.error(f"Pipeline run failed: {e}", exc_info=True)
            request.future.set_exception(e)
        else:
            request.future.set_result(result)
