"""Error handling framework for glide-migrate."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ExitCode(IntEnum):
    """glide-migrate CLI exit codes."""

    SUCCESS = 0
    INPUT_ERROR = 1  # Bad dialect, unreadable input (user fixable)
    PARTIAL_SUCCESS = 2  # Some files skipped
    FATAL_ERROR = 3  # Unexpected crash or broken catalog


class MigrateError(Exception):
    """Base exception for glide-migrate errors."""

    exit_code: ExitCode = ExitCode.FATAL_ERROR

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON output."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "exit_code": int(self.exit_code),
            **self.context,
        }


class InputError(MigrateError):
    """Missing or unrecognized input (source dialect, collaborator file)."""

    exit_code = ExitCode.INPUT_ERROR


class UnsupportedDialectError(InputError):
    """Source dialect not supported."""

    def __init__(self, dialect: str | None, supported: list[str]):
        super().__init__(
            f"Unsupported source dialect: {dialect!r} (expected one of: {', '.join(supported)})",
            dialect=dialect,
            supported=supported,
        )
        self.dialect = dialect


class CatalogError(MigrateError):
    """Signature catalog is inconsistent (programmer error, raised at startup)."""

    exit_code = ExitCode.FATAL_ERROR


class ProcessingResult:
    """Result of processing a file or batch of files."""

    def __init__(self) -> None:
        self.processed: list[str] = []
        self.skipped: list[dict[str, Any]] = []
        self.errors: list[MigrateError] = []

    @property
    def success(self) -> bool:
        """True if no fatal errors occurred."""
        return not any(e.exit_code == ExitCode.FATAL_ERROR for e in self.errors)

    @property
    def exit_code(self) -> ExitCode:
        """Determine exit code based on results."""
        if any(e.exit_code == ExitCode.FATAL_ERROR for e in self.errors):
            return ExitCode.FATAL_ERROR
        if any(e.exit_code == ExitCode.INPUT_ERROR for e in self.errors):
            return ExitCode.INPUT_ERROR
        if self.skipped or self.errors:
            return ExitCode.PARTIAL_SUCCESS
        return ExitCode.SUCCESS

    def add_processed(self, file_path: str) -> None:
        """Mark a file as successfully processed."""
        self.processed.append(file_path)

    def add_skipped(self, file_path: str, reason: str) -> None:
        """Mark a file as skipped."""
        self.skipped.append({"path": file_path, "reason": reason})

    def add_error(self, error: MigrateError) -> None:
        """Record an error."""
        self.errors.append(error)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for JSON output."""
        return {
            "success": self.success,
            "exit_code": int(self.exit_code),
            "processed": len(self.processed),
            "skipped": len(self.skipped),
            "errors": [e.to_dict() for e in self.errors],
            "skipped_files": self.skipped,
        }
