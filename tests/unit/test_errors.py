"""Tests for the error taxonomy and batch processing results."""

from __future__ import annotations

from glide_migrate.errors import (
    CatalogError,
    ExitCode,
    InputError,
    MigrateError,
    ProcessingResult,
    UnsupportedDialectError,
)


class TestErrors:
    """Tests for MigrateError subclasses."""

    def test_exit_codes(self) -> None:
        """Each error class carries its exit code."""
        assert InputError("x").exit_code == ExitCode.INPUT_ERROR
        assert CatalogError("x").exit_code == ExitCode.FATAL_ERROR
        assert MigrateError("x").exit_code == ExitCode.FATAL_ERROR

    def test_unsupported_dialect(self) -> None:
        """UnsupportedDialectError is an InputError listing alternatives."""
        error = UnsupportedDialectError("jedis", ["ioredis", "node-redis"])
        assert isinstance(error, InputError)
        assert error.dialect == "jedis"
        assert "ioredis, node-redis" in error.message

    def test_to_dict(self) -> None:
        """Context keyword arguments are included in the dict."""
        data = InputError("Failed to read file", file_path="a.ts").to_dict()
        assert data == {
            "error": "InputError",
            "message": "Failed to read file",
            "exit_code": 1,
            "file_path": "a.ts",
        }


class TestProcessingResult:
    """Tests for ProcessingResult exit code derivation."""

    def test_success(self) -> None:
        """All files processed means success."""
        result = ProcessingResult()
        result.add_processed("a.ts")
        assert result.success
        assert result.exit_code == ExitCode.SUCCESS

    def test_partial(self) -> None:
        """Skipped files downgrade to partial success."""
        result = ProcessingResult()
        result.add_processed("a.ts")
        result.add_skipped("b.ts", "unreadable")
        assert result.exit_code == ExitCode.PARTIAL_SUCCESS
        assert result.to_dict()["skipped_files"] == [{"path": "b.ts", "reason": "unreadable"}]

    def test_input_error(self) -> None:
        """Input errors take precedence over skips."""
        result = ProcessingResult()
        result.add_skipped("b.ts", "unreadable")
        result.add_error(InputError("bad"))
        assert result.success
        assert result.exit_code == ExitCode.INPUT_ERROR

    def test_fatal(self) -> None:
        """Fatal errors fail the batch."""
        result = ProcessingResult()
        result.add_error(CatalogError("broken"))
        assert not result.success
        assert result.exit_code == ExitCode.FATAL_ERROR
