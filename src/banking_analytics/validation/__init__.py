"""Business-rule validation."""

from banking_analytics.validation.base import BaseCheck, CheckContext
from banking_analytics.validation.validator import get_all_checks, validate

__all__ = ["BaseCheck", "CheckContext", "get_all_checks", "validate"]
