"""Two-channel event intake for the recorder.

Motion samples and GPS fixes arrive on separate ``asyncio.Queue`` channels.
Both consumers run on the same event loop and call the recorder
synchronously, so each event is fully processed before the next one and no
locking is needed between them.

``start()`` and ``stop()`` settle both queues before switching the recorder,
so every event is handled in the state that was current when it was put:
events queued while idle stay ignored, and events queued while recording
still count towards the session they arrived in.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from .domain_models import MotionEvent, PositionEvent
from .processing.recorder import RoadRoughnessRecorder

LOGGER = logging.getLogger(__name__)

_QUEUE_DROP_LOG_INTERVAL_S: float = 10.0


class EventDispatcher:
    def __init__(
        self,
        recorder: RoadRoughnessRecorder,
        motion_queue_maxsize: int = 1024,
        position_queue_maxsize: int = 256,
        queue_drop_log_interval_s: float = _QUEUE_DROP_LOG_INTERVAL_S,
    ):
        self.recorder = recorder
        self._motion_queue: asyncio.Queue[MotionEvent] = asyncio.Queue(
            maxsize=max(1, motion_queue_maxsize)
        )
        self._position_queue: asyncio.Queue[PositionEvent] = asyncio.Queue(
            maxsize=max(1, position_queue_maxsize)
        )
        self._queue_drop_log_interval_s = max(0.0, float(queue_drop_log_interval_s))
        self._last_queue_drop_log_ts = 0.0
        self._suppressed_queue_drop_warnings = 0
        self._tasks: list[asyncio.Task[None]] = []
        self.dropped_motion: int = 0
        self.dropped_position: int = 0

    # -- control --------------------------------------------------------------

    async def start(self) -> bool:
        await self.settle()
        return self.recorder.start()

    async def stop(self) -> bool:
        """Stop recording once everything queued so far belongs to the session."""
        await self.settle()
        return self.recorder.stop()

    async def settle(self) -> None:
        """Handle every event queued so far.

        Uses the running consumers when there are any, otherwise handles the
        backlog inline.
        """
        if self._tasks:
            await self.drain()
            return
        while not self._position_queue.empty():
            self._handle_position(self._position_queue.get_nowait())
            self._position_queue.task_done()
        while not self._motion_queue.empty():
            self._handle_motion(self._motion_queue.get_nowait())
            self._motion_queue.task_done()

    # -- intake ---------------------------------------------------------------

    def put_motion(self, event: MotionEvent) -> bool:
        try:
            self._motion_queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped_motion += 1
            self._log_drop("motion")
            return False
        return True

    def put_position(self, event: PositionEvent) -> bool:
        try:
            self._position_queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped_position += 1
            self._log_drop("position")
            return False
        return True

    def _log_drop(self, channel: str) -> None:
        now = time.monotonic()
        if (now - self._last_queue_drop_log_ts) < self._queue_drop_log_interval_s:
            self._suppressed_queue_drop_warnings += 1
            return
        suppressed = self._suppressed_queue_drop_warnings
        self._suppressed_queue_drop_warnings = 0
        self._last_queue_drop_log_ts = now
        if suppressed > 0:
            LOGGER.warning(
                "%s queue full; dropping event; suppressed %d additional drop warnings",
                channel,
                suppressed,
            )
        else:
            LOGGER.warning("%s queue full; dropping event", channel)

    # -- consumers ------------------------------------------------------------

    def _handle_motion(self, event: MotionEvent) -> None:
        try:
            self.recorder.on_motion(event)
        except Exception:
            LOGGER.warning("Error processing motion event %r", event, exc_info=True)

    def _handle_position(self, event: PositionEvent) -> None:
        try:
            self.recorder.on_position(event)
        except Exception:
            LOGGER.warning("Error processing position event %r", event, exc_info=True)

    async def process_motion_queue(self) -> None:
        while True:
            event = await self._motion_queue.get()
            try:
                self._handle_motion(event)
            finally:
                self._motion_queue.task_done()

    async def process_position_queue(self) -> None:
        while True:
            event = await self._position_queue.get()
            try:
                self._handle_position(event)
            finally:
                self._position_queue.task_done()

    def run(self) -> list[asyncio.Task[None]]:
        """Start both consumers on the running loop."""
        if not self._tasks:
            self._tasks = [
                asyncio.create_task(self.process_motion_queue(), name="motion-consumer"),
                asyncio.create_task(self.process_position_queue(), name="position-consumer"),
            ]
        return self._tasks

    async def drain(self) -> None:
        """Wait until every queued event has been handled."""
        await self._motion_queue.join()
        await self._position_queue.join()

    async def close(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def stats(self) -> dict[str, Any]:
        return {
            "motion_queued": self._motion_queue.qsize(),
            "position_queued": self._position_queue.qsize(),
            "dropped_motion": self.dropped_motion,
            "dropped_position": self.dropped_position,
        }
