"""
Logging utilities for the invoice analytics backend.

Provides standardized logger configuration.

Logging rules:
- NEVER log OAuth access/refresh tokens, id_tokens, API keys or the session secret
- NEVER log full invoice documents or embedded PDF payloads
- Prefer identifiers over content (invoice_num, vendor, counts)

Acceptable logging:
- High-level events (e.g., "Chat message processed", "Invoice reconciled")
- Non-sensitive metadata (e.g., "invoice_num=INV-2023-004, vendor=BuildSmart")
- Error codes and sanitized error messages
"""

import logging
from typing import Optional

from backend.config import settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to settings.LOG_LEVEL)

    Returns:
        Configured logger instance

    Usage:
        >>> from backend.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
