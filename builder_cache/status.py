"""Status indicator shown while builders are being installed."""

from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

StopFn = Callable[[], None]


class StatusIndicator(Protocol):
    def __call__(self, message: str) -> StopFn: ...


def log_status(message: str) -> StopFn:
    """
    Log `message` now and its elapsed time when the returned stop function runs.
    """
    started = time.monotonic()
    logger.info("%s ...", message)

    def stop() -> None:
        logger.info("%s finished after %.1fs", message, time.monotonic() - started)

    return stop
