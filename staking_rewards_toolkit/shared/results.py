"""
Result types for explicit success/failure tracking.

Service calls (rewards, governance votes, address resolution) return a
Result instead of raising, so a failing wallet never hides behind an
exception and partial success across wallets stays visible.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ErrorSeverity(Enum):
    """Severity levels for processing errors."""

    WARNING = "warning"  # Continue processing, log issue
    ERROR = "error"  # Skip this item, continue others
    CRITICAL = "critical"  # Stop processing entirely


@dataclass
class ProcessingError:
    """
    Represents a single processing error with context.

    Attributes:
        source: Component that generated the error (e.g., "rewards_service")
        message: Human-readable error description
        severity: How severe the error is (affects control flow)
        context: Additional context like wallet, kind, status_code
        exception: Original exception if available
    """

    source: str
    message: str
    severity: ErrorSeverity
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "source": self.source,
            "message": self.message,
            "severity": self.severity.value,
            "context": self.context,
        }


@dataclass
class Result(Generic[T]):
    """
    Result type that carries success/failure information.

    Attributes:
        success: Whether the operation succeeded
        data: The result data if successful
        errors: Errors encountered
    """

    success: bool
    data: Optional[T] = None
    errors: List[ProcessingError] = field(default_factory=list)

    @classmethod
    def ok(cls, data: T) -> "Result[T]":
        """Create a successful result with data."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: ProcessingError) -> "Result[T]":
        """Create a failed result with an error."""
        return cls(success=False, errors=[error])

    @classmethod
    def fail_with_message(
        cls,
        source: str,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[Dict[str, Any]] = None,
        exception: Optional[Exception] = None,
    ) -> "Result[T]":
        """Create a failed result with a message (convenience method)."""
        error = ProcessingError(
            source=source,
            message=message,
            severity=severity,
            context=context or {},
            exception=exception,
        )
        return cls(success=False, errors=[error])

    @property
    def message(self) -> Optional[str]:
        """First error message, or None."""
        return self.errors[0].message if self.errors else None


@dataclass
class RefreshSummary:
    """
    Summary of a multi-wallet refresh run.

    Wallets are independent: a failed wallet is counted and reported while
    the others still contribute to the dashboard.
    """

    wallets_refreshed: int = 0
    wallets_failed: int = 0
    wallets_cancelled: int = 0
    errors: List[ProcessingError] = field(default_factory=list)
    failed_wallets: List[str] = field(default_factory=list)

    def record_success(self, address: str) -> None:
        self.wallets_refreshed += 1

    def record_failure(self, address: str, result: Result) -> None:
        self.wallets_failed += 1
        self.failed_wallets.append(address)
        self.errors.extend(result.errors)

    def record_cancelled(self, address: str) -> None:
        self.wallets_cancelled += 1

    def is_partial(self) -> bool:
        """Some wallets loaded and some failed."""
        return self.wallets_refreshed > 0 and self.wallets_failed > 0

    def _calculate_rate(self, success: int, failed: int) -> str:
        """Calculate success rate as string."""
        total = success + failed
        if total == 0:
            return "N/A"
        return f"{success}/{total}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to dictionary for JSON serialization."""
        return {
            "success_rate": self._calculate_rate(
                self.wallets_refreshed, self.wallets_failed
            ),
            "counts": {
                "wallets_refreshed": self.wallets_refreshed,
                "wallets_failed": self.wallets_failed,
                "wallets_cancelled": self.wallets_cancelled,
            },
            "errors": [e.to_dict() for e in self.errors],
            "failed_wallets": self.failed_wallets,
        }

