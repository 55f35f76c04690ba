"""Tests for error types and codes."""

import pytest

from symgraph.core.errors import (
    ConfigError,
    ErrorCode,
    GraphError,
    InternalError,
    ParserError,
    SymgraphError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.GRAPH_NOT_LOADED, 3000),
            (ErrorCode.SNAPSHOT_INVALID, 3000),
            (ErrorCode.PARSER_NOT_FOUND, 4000),
            (ErrorCode.NO_SOURCE_UNITS, 4000),
            (ErrorCode.INTERNAL_ERROR, 9000),
            (ErrorCode.INTERNAL_TIMEOUT, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestSymgraphError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = SymgraphError(
            code=ErrorCode.SNAPSHOT_INVALID,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 3003,
            "error": "SNAPSHOT_INVALID",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_includes_code_and_name(self) -> None:
        """String form carries numeric code, name and message."""
        error = SymgraphError(code=ErrorCode.INTERNAL_ERROR, message="boom")

        assert str(error) == "[9001] INTERNAL_ERROR: boom"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        """Typed errors are ordinary exceptions."""
        with pytest.raises(SymgraphError) as exc_info:
            raise GraphError.not_loaded()

        assert exc_info.value.code is ErrorCode.GRAPH_NOT_LOADED


class TestConfigError:
    """Configuration error factory tests."""

    def test_given_parse_error_when_created_then_records_path(self) -> None:
        """Parse errors keep the offending path and reason."""
        error = ConfigError.parse_error("/tmp/config.yaml", "bad indent")

        assert error.code is ErrorCode.CONFIG_PARSE_ERROR
        assert error.details == {"path": "/tmp/config.yaml", "reason": "bad indent"}
        assert "/tmp/config.yaml" in error.message

    def test_given_invalid_value_when_created_then_stringifies_value(self) -> None:
        """Invalid values are stored as strings for JSON safety."""
        error = ConfigError.invalid_value("parsers.max_concurrency", 0, "must be >= 1")

        assert error.details["value"] == "0"
        assert "parsers.max_concurrency" in error.message


class TestGraphError:
    """Graph lifecycle error factory tests."""

    def test_given_not_loaded_when_created_then_retryable(self) -> None:
        """Missing graph is a precondition the caller can fix and retry."""
        error = GraphError.not_loaded()

        assert error.retryable is True
        assert error.code is ErrorCode.GRAPH_NOT_LOADED

    def test_given_snapshot_invalid_when_created_then_not_retryable(self) -> None:
        """Malformed snapshots are hard failures."""
        error = GraphError.snapshot_invalid("/repo/app.json", "missing keys: files")

        assert error.retryable is False
        assert error.details["reason"] == "missing keys: files"


class TestParserError:
    """Parser error factory tests."""

    def test_given_hint_when_parser_not_found_then_appends_hint(self) -> None:
        """Install hints are part of the message."""
        error = ParserError.parser_not_found("sourcekitten", "Install with: brew install sourcekitten")

        assert error.message.endswith("Install with: brew install sourcekitten")
        assert error.details == {"executable": "sourcekitten"}

    def test_given_no_hint_when_parser_not_found_then_plain_message(self) -> None:
        error = ParserError.parser_not_found("clang")

        assert error.message == "Parser executable not found: clang"

    def test_given_unit_when_parse_failed_then_names_unit(self) -> None:
        error = ParserError.parse_failed("Sources/A.swift", "exit code 1")

        assert error.code is ErrorCode.PARSE_FAILED
        assert "Sources/A.swift" in error.message


class TestInternalError:
    """Internal error factory tests."""

    def test_given_timeout_when_created_then_retryable_with_seconds(self) -> None:
        error = InternalError.timeout("parse A.swift", 60.0)

        assert error.retryable is True
        assert error.details == {"operation": "parse A.swift", "seconds": 60.0}

    def test_given_details_when_unexpected_then_kept(self) -> None:
        error = InternalError.unexpected("bad state", unit="A.swift")

        assert error.details == {"unit": "A.swift"}
