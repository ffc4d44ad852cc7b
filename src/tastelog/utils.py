"""
Utility functions for Tastelog.

Includes logging setup, text normalization, and safe arithmetic.
"""

import logging
from typing import Any, Optional

from tastelog.config import LOG_LEVEL

logger = logging.getLogger(__name__)


# =======================
# LOGGING
# =======================

def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging for scripts."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


# =======================
# INPUT NORMALIZATION
# =======================

def blank_to_none(value: Any) -> Any:
    """
    Treat empty or whitespace-only strings as absent.

    Non-string values pass through untouched.
    """
    if isinstance(value, str) and not value.strip():
        return None
    return value


def has_value(value: Optional[Any]) -> bool:
    """True if an optional attribute is defined (not None, not an empty string)."""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True


# =======================
# ARITHMETIC
# =======================

def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, handling zero division.

    Args:
        numerator: Number to divide
        denominator: Number to divide by
        default: Value to return if division by zero

    Returns:
        Result of division or default
    """
    if denominator == 0:
        logger.debug(f"Division by zero: {numerator}/{denominator}, returning {default}")
        return default
    return numerator / denominator
