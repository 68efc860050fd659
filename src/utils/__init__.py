# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for LearnFeed.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations and display labels
"""

from src.utils.datetime import (
    coerce_timestamp,
    ensure_utc,
    format_date_label,
    format_time_label,
    local_date,
    parse_iso,
    utc_from_timestamp,
    utc_now,
)
from src.utils.logging import feed_run_context, get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "feed_run_context",
    # Datetime
    "utc_now",
    "utc_from_timestamp",
    "ensure_utc",
    "coerce_timestamp",
    "local_date",
    "parse_iso",
    "format_date_label",
    "format_time_label",
]
