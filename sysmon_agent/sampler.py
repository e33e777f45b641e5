from typing import NamedTuple, Optional

import psutil
import structlog

logger = structlog.get_logger(__name__)


class Reading(NamedTuple):
    value: float
    ok: bool
    error: Optional[str] = None


def _failed(e: Exception) -> Reading:
    return Reading(0.0, False, str(e) or e.__class__.__name__)


class MetricsSampler:
    """Point-in-time CPU, memory and disk utilization.

    Each measure_* call is independent and never raises; a failure comes
    back as ``Reading(0.0, False, error)``.
    """

    def __init__(self, disk_path: str = "/"):
        self.disk_path = disk_path
        # cpu_percent(interval=None) compares against the previous call
        try:
            psutil.cpu_percent(interval=None)
        except Exception as e:
            logger.warning("Could not prime CPU counter", error=str(e))

    def measure_cpu(self) -> Reading:
        try:
            return Reading(float(psutil.cpu_percent(interval=None)), True)
        except Exception as e:
            return _failed(e)

    def measure_memory(self) -> Reading:
        try:
            return Reading(float(psutil.virtual_memory().percent), True)
        except Exception as e:
            return _failed(e)

    def measure_disk(self) -> Reading:
        try:
            return Reading(float(psutil.disk_usage(self.disk_path).percent), True)
        except Exception as e:
            return _failed(e)
