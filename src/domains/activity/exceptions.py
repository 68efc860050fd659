# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity feed exceptions."""


class ActivityFeedError(Exception):
    """Base exception for activity feed errors."""

    pass


class SourceUnavailableError(ActivityFeedError):
    """Raised by a store when it cannot be reached or a listing fails.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying exception, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class RecordNotFoundError(ActivityFeedError):
    """Raised when a record is not part of the published feed."""

    pass
