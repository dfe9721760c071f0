"""Exception hierarchy for reflex-datatable.

Every error raised by the package inherits from :class:`DataTableError`.
Out-of-range pages, missing field values and empty datasets are *not*
errors: the pipeline clamps or treats them as data.  Exceptions raised by
caller-supplied comparators, filter functions, identity functions and
change callbacks are never wrapped and propagate unchanged.
"""

from typing import Any


class DataTableError(Exception):
    """Base exception for all reflex-datatable errors."""

    def __init__(self, message: str, **context: Any) -> None:
        """Initialise the error.

        Args:
            message: Human-readable error message.
            **context: Additional context (field, value, ...), rendered
                after the message by ``__str__``.
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class GridConfigurationError(DataTableError, ValueError):
    """A configuration value was rejected.

    Raised when a grid is configured with values that can never produce a
    valid view: a page size below one, a malformed field path, a sort on a
    column declared unsortable, and similar.
    """


class InvalidPathError(GridConfigurationError):
    """A dot-separated field path is malformed (empty or with empty segments)."""

    def __init__(self, message: str, path: str | None = None, **context: Any) -> None:
        super().__init__(message, path=path, **context)
        self.path = path


class GridDisposedError(DataTableError):
    """An operation was attempted on a grid engine after ``dispose()``."""
