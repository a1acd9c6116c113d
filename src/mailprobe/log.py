# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for mailprobe."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("MAILPROBE_LOG_LEVEL", "WARNING").upper()

# httpx logs every request at INFO; only let it through when debugging.
_CHATTY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for the CLI and the verification service."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    numeric_level = getattr(logging, effective_level, logging.WARNING)
    logging.basicConfig(
        level=numeric_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if numeric_level > logging.DEBUG:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


__all__ = ["setup_logging"]
