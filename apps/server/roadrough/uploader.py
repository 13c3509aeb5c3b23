"""Record delivery to the collection API.

:class:`HttpUploader` is a blocking ``submit(record) -> bool`` sink that
POSTs one record as JSON.  :class:`BackgroundUploader` wraps any sink with a
:class:`~roadrough.worker_pool.WorkerPool` so the recorder can hand records
off without waiting on the network.  Neither retries; a failed upload is
logged, counted and reported as ``False``.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from pydantic import ValidationError

from .api_models import DeviceRegistration, MeasurementPayload
from .domain_models import MeasurementRecord
from .processing.recorder import RecordSink
from .worker_pool import WorkerPool

LOGGER = logging.getLogger(__name__)

UPLOAD_PATH = "/api/upload"
REGISTER_PATH = "/api/register"


def _validate_url(url: str) -> None:
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"Refusing non-HTTP URL for upload: {url}")


class HttpUploader:
    def __init__(self, base_url: str, timeout_s: float = 10.0) -> None:
        _validate_url(base_url)
        self.base_url = base_url.rstrip("/")
        self.timeout_s = float(timeout_s)

    def _post_json(self, path: str, body: bytes) -> bool:
        url = f"{self.base_url}{path}"
        req = Request(
            url,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urlopen(req, timeout=self.timeout_s) as resp:  # noqa: S310
                status = int(getattr(resp, "status", 200))
        except HTTPError as exc:
            LOGGER.error("POST %s failed with status: %s", path, exc.code)
            return False
        except (URLError, OSError) as exc:
            LOGGER.error("POST %s error: %s", path, exc)
            return False
        if not 200 <= status < 300:
            LOGGER.error("POST %s failed with status: %s", path, status)
            return False
        return True

    def submit(self, record: MeasurementRecord) -> bool:
        try:
            payload = MeasurementPayload.from_record(record)
        except ValidationError as exc:
            LOGGER.warning(
                "Refusing to upload invalid record from %s at %s: %s",
                record.device_id,
                record.timestamp,
                exc,
            )
            return False
        return self._post_json(UPLOAD_PATH, payload.model_dump_json().encode("utf-8"))

    def register_device(self, device_id: str) -> bool:
        body = DeviceRegistration(device_id=device_id).model_dump_json().encode("utf-8")
        ok = self._post_json(REGISTER_PATH, body)
        if ok:
            LOGGER.info("Device registered successfully: %s", device_id)
        return ok


class BackgroundUploader:
    """Non-blocking adapter: ``submit()`` queues the record and returns ``True``."""

    def __init__(self, sink: RecordSink, pool: WorkerPool | None = None) -> None:
        self._sink = sink
        self._owns_pool = pool is None
        self._pool = pool or WorkerPool(thread_name_prefix="roadrough-upload")
        self._lock = threading.Lock()
        self.succeeded: int = 0
        self.failed: int = 0

    def submit(self, record: MeasurementRecord) -> bool:
        try:
            future = self._pool.submit(self._sink.submit, record)
        except RuntimeError:
            LOGGER.warning("Upload pool is shut down; dropping record %s", record.timestamp)
            return False
        future.add_done_callback(self._on_done)
        return True

    def _on_done(self, future: Future[bool]) -> None:
        try:
            ok = bool(future.result())
        except Exception:
            LOGGER.warning("Background upload raised", exc_info=True)
            ok = False
        with self._lock:
            if ok:
                self.succeeded += 1
            else:
                self.failed += 1

    def close(self, wait: bool = True) -> None:
        if self._owns_pool:
            self._pool.shutdown(wait=wait)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "succeeded": self.succeeded,
                "failed": self.failed,
                "pending": self._pool.pending,
            }
