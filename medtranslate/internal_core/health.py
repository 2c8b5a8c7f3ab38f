from __future__ import annotations

"""
Periodic liveness check against the translation backend.

Design intent:
- Run on its own timer, never in the translation or recognition path.
- Record failures as status, never raise them to the caller.
"""

import asyncio
import datetime as _dt
import logging
from typing import Any, Awaitable, Callable, Optional

from .contracts import HealthStatus

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SEC = 30.0


class HealthProbe:
    def __init__(
        self,
        check: Callable[[], Awaitable[Any]],
        *,
        interval_sec: float = DEFAULT_INTERVAL_SEC,
        on_change: Optional[Callable[[HealthStatus], None]] = None,
    ) -> None:
        self._check = check
        self._interval_sec = max(0.01, float(interval_sec))
        self._on_change = on_change
        self._task: Optional[asyncio.Task] = None
        self.status: HealthStatus = "unknown"
        self.last_error: Optional[str] = None
        self.last_checked_iso: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self.status == "connected"

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _set_status(self, status: HealthStatus) -> None:
        previous = self.status
        self.status = status
        if status != previous:
            logger.info("translation backend %s -> %s", previous, status)
            if self._on_change is not None:
                self._on_change(status)

    async def check(self) -> HealthStatus:
        try:
            await self._check()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self.last_error = str(exc) or exc.__class__.__name__
            logger.warning("health check failed: %s", self.last_error)
            self._set_status("disconnected")
        else:
            self.last_error = None
            self._set_status("connected")
        finally:
            self.last_checked_iso = _dt.datetime.now(_dt.timezone.utc).isoformat()
        return self.status

    async def _run(self) -> None:
        while True:
            await self.check()
            await asyncio.sleep(self._interval_sec)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
