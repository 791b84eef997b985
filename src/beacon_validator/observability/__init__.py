"""
Observability for the beacon validator.

Structured logging with run context binding.
"""

from beacon_validator.observability.logging import LogContext, configure_logging

__all__ = [
    "LogContext",
    "configure_logging",
]
