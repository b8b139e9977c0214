from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable, Optional

from .model import GeoPoint

logger = logging.getLogger(__name__)

LocationProvider = Callable[[], Optional[GeoPoint]]

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="geolocation")


def best_effort_location(provider: LocationProvider, *, timeout: float) -> Optional[GeoPoint]:
    """Ask a location provider, giving up after `timeout` seconds.

    Used by AttendanceTracker when a caller hands it a provider instead
    of coordinates.

    Timeouts, permission denials and any other provider error yield None.
    """

    future = _executor.submit(provider)
    try:
        return future.result(timeout=timeout)
    except FutureTimeout:
        future.cancel()
        logger.warning("[Attendance] Location lookup timed out after %ss; recording without coordinates", timeout)
        return None
    except Exception as e:
        logger.warning("[Attendance] Location unavailable (%s); recording without coordinates", e, exc_info=True)
        return None
