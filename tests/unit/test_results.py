"""
Unit tests for the Result types module.
"""

from staking_rewards_toolkit.shared.results import (
    ErrorSeverity,
    ProcessingError,
    RefreshSummary,
    Result,
)


class TestProcessingError:
    """Tests for ProcessingError dataclass."""

    def test_create_error(self):
        """Test creating a processing error."""
        error = ProcessingError(
            source="rewards_service",
            message="HTTP error 404: Not Found",
            severity=ErrorSeverity.ERROR,
        )
        assert error.source == "rewards_service"
        assert error.context == {}
        assert error.exception is None

    def test_to_dict(self):
        """Test converting error to dictionary."""
        error = ProcessingError(
            source="rewards_service",
            message="timeout",
            severity=ErrorSeverity.WARNING,
            context={"wallet": "erd1abc", "kind": "network"},
            exception=TimeoutError("timeout"),
        )
        d = error.to_dict()
        assert d == {
            "source": "rewards_service",
            "message": "timeout",
            "severity": "warning",
            "context": {"wallet": "erd1abc", "kind": "network"},
        }


class TestResult:
    """Tests for Result[T] generic class."""

    def test_ok_result(self):
        result = Result.ok({"data": "test"})
        assert result.success is True
        assert result.data == {"data": "test"}
        assert result.errors == []
        assert result.message is None

    def test_fail_result(self):
        error = ProcessingError(
            source="test", message="Test error", severity=ErrorSeverity.ERROR
        )
        result = Result.fail(error)
        assert result.success is False
        assert result.data is None
        assert result.message == "Test error"

    def test_fail_with_message(self):
        result = Result.fail_with_message(
            source="governance_service",
            message="Invalid governance votes response structure",
            context={"kind": "parsing"},
        )
        assert result.success is False
        assert result.errors[0].severity == ErrorSeverity.ERROR
        assert result.errors[0].context["kind"] == "parsing"


class TestRefreshSummary:
    """Tests for RefreshSummary dataclass."""

    def test_counts(self):
        summary = RefreshSummary()
        summary.record_success("a")
        summary.record_failure("b", Result.fail_with_message("rewards_service", "down"))
        summary.record_cancelled("c")

        assert summary.wallets_refreshed == 1
        assert summary.wallets_failed == 1
        assert summary.wallets_cancelled == 1
        assert summary.failed_wallets == ["b"]
        assert summary.is_partial() is True

    def test_to_dict(self):
        summary = RefreshSummary(wallets_refreshed=3, wallets_failed=1)
        d = summary.to_dict()
        assert d["success_rate"] == "3/4"
        assert d["counts"]["wallets_refreshed"] == 3
        assert d["errors"] == []

    def test_to_dict_with_no_totals(self):
        assert RefreshSummary().to_dict()["success_rate"] == "N/A"

    def test_not_partial_when_all_failed(self):
        summary = RefreshSummary(wallets_failed=2)
        assert summary.is_partial() is False

