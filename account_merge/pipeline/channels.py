"""Bounded, cancellable hand-off queues between pipeline stages."""

from __future__ import annotations

import queue
import threading
from typing import Any

from account_merge.common.errors import PipelineAborted


class BoundedChannel:
    """A ``queue.Queue`` whose blocking calls give up once ``abort`` is set.

    ``put`` blocks while the channel is full and ``get`` blocks while it is
    empty; both wake every ``poll_interval`` seconds to check the abort event.
    """

    def __init__(self, capacity: int, abort: threading.Event, poll_interval: float = 0.1) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.abort = abort
        self.poll_interval = poll_interval
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=capacity)

    def put(self, item: Any) -> None:
        while True:
            if self.abort.is_set():
                raise PipelineAborted("Pipeline aborted while waiting to enqueue")
            try:
                self._queue.put(item, timeout=self.poll_interval)
                return
            except queue.Full:
                continue

    def get(self) -> Any:
        while True:
            if self.abort.is_set():
                raise PipelineAborted("Pipeline aborted while waiting to dequeue")
            try:
                return self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                continue

    def qsize(self) -> int:
        return self._queue.qsize()

    def full(self) -> bool:
        return self._queue.full()
