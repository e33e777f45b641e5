"""Host telemetry agent: samples CPU, memory and disk usage and POSTs it as JSON."""

__version__ = "0.1.0"
