"""Package-specific exception types."""

from __future__ import annotations

from pathlib import Path


class LintError(Exception):
    """Base class for errors raised while linting files.

    Rules themselves never raise; these errors come from reading input.
    """


class FileTooLargeError(LintError):
    """Raised when a file exceeds the configured maximum size.

    Args:
        filepath: Path of the offending file.
        max_file_size: Maximum allowed size in bytes.
    """

    def __init__(self, filepath: Path, max_file_size: int):
        self.filepath = filepath
        self.max_file_size = max_file_size
        super().__init__(
            f"{filepath} exceeds the maximum allowed size of {max_file_size} bytes."
        )


class LintFileError(LintError):
    """Raised when a Markdown file cannot be read or decoded for linting."""
