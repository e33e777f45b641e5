import sys
import time
from typing import Optional

import structlog

from .address import resolve_local_address
from .config import Settings
from .logging_setup import configure_logging
from .models import Sample
from .publisher import PublishError, Publisher
from .sampler import MetricsSampler

logger = structlog.get_logger(__name__)


class MonitorAgent:
    """Sample, stamp with the local address, POST, sleep, repeat."""

    def __init__(
        self,
        settings: Settings,
        sampler: Optional[MetricsSampler] = None,
        publisher: Optional[Publisher] = None,
        resolver=resolve_local_address,
        sleep=time.sleep,
    ):
        self.settings = settings
        self.sampler = sampler or MetricsSampler()
        self.publisher = publisher or Publisher()
        self.resolver = resolver
        self.sleep = sleep
        self.client_ip: Optional[str] = None

    def start(self):
        logger.info(
            "Monitoring agent started",
            server_url=self.settings.server_url,
            interval_seconds=self.settings.interval_seconds,
        )
        self.client_ip = self.resolver()
        logger.info("Local IP", address=self.client_ip)

    def collect_sample(self) -> Sample:
        values = {}
        for field, label, measure in (
            ("cpu_percent", "CPU", self.sampler.measure_cpu),
            ("memory_percent", "memory", self.sampler.measure_memory),
            ("disk_percent", "disk", self.sampler.measure_disk),
        ):
            reading = measure()
            if not reading.ok:
                logger.error("Failed to read usage", metric=label, error=reading.error)
            values[field] = reading.value if reading.ok else 0.0

        return Sample(source_address=self.client_ip, **values)

    def run_once(self) -> bool:
        """One tick. Returns True if the sample was delivered."""
        sample = self.collect_sample()
        try:
            self.publisher.publish(sample, self.settings.server_url)
        except PublishError as e:
            logger.error("Failed to send metrics to server", error=str(e))
            return False

        logger.info("Metrics sent", sample=sample.model_dump(by_alias=True))
        return True

    def run(self, iterations: Optional[int] = None):
        """Loop forever, or ``iterations`` times when given."""
        if self.client_ip is None:
            self.start()

        done = 0
        while iterations is None or done < iterations:
            self.run_once()
            done += 1
            self.sleep(self.settings.interval_seconds)


def main(environ=None) -> int:
    settings = Settings.from_env(environ)

    try:
        configure_logging(settings.log_file_path)
    except OSError as e:
        print(f"Error opening log file {settings.log_file_path}: {e}", file=sys.stderr)
        return 1

    for warning in settings.warnings:
        logger.warning(warning)

    MonitorAgent(settings).run()
    return 0
