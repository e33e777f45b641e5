"""
Agent configuration, loaded from environment variables.
"""

import re
from typing import Mapping, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SERVER_URL = "http://192.168.1.180/monitor/monitor.php"
DEFAULT_LOG_FILE_PATH = "/var/log/monitor/monitor.log"
DEFAULT_INTERVAL_SECONDS = 20

ENV_VARS = ("SERVER_URL", "LOG_FILE_PATH", "INTERVAL_SECONDS")

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def parse_interval(raw: str) -> Tuple[int, Optional[str]]:
    """
    Returns (seconds, None) for a valid interval,
            (DEFAULT_INTERVAL_SECONDS, warning) otherwise.
    """
    text = raw.strip()
    if not _INTEGER_RE.match(text):
        return DEFAULT_INTERVAL_SECONDS, (
            f"invalid INTERVAL_SECONDS {raw!r}, "
            f"using default {DEFAULT_INTERVAL_SECONDS} seconds"
        )

    seconds = int(text)
    if seconds < 1:
        return DEFAULT_INTERVAL_SECONDS, (
            f"INTERVAL_SECONDS must be at least 1, got {seconds}, "
            f"using default {DEFAULT_INTERVAL_SECONDS} seconds"
        )
    return seconds, None


class Settings(BaseSettings):
    """Agent settings loaded from environment."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True, case_sensitive=True)

    server_url: str = Field(default=DEFAULT_SERVER_URL, alias="SERVER_URL")
    log_file_path: str = Field(default=DEFAULT_LOG_FILE_PATH, alias="LOG_FILE_PATH")
    # kept as text so a malformed value degrades instead of failing validation
    interval_raw: str = Field(default=str(DEFAULT_INTERVAL_SECONDS), alias="INTERVAL_SECONDS")

    @property
    def interval_seconds(self) -> int:
        return parse_interval(self.interval_raw)[0]

    @property
    def warnings(self) -> Tuple[str, ...]:
        warning = parse_interval(self.interval_raw)[1]
        return (warning,) if warning else ()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read settings from ``environ``, or the process environment.

        A variable set to the empty string still counts as set.
        """
        if environ is None:
            return cls()
        return cls.model_validate({key: environ[key] for key in ENV_VARS if key in environ})
