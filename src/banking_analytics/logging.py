"""Re-export logging utilities (see logging_config for implementation)."""

from banking_analytics.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
