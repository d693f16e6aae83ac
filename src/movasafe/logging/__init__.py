"""MovaSafe Logging — logging port and structlog adapter."""

from movasafe.logging.port import LoggingPort
from movasafe.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
