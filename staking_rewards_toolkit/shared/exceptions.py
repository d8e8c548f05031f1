"""
Exception hierarchy for the Staking Rewards toolkit.

Exception Categories:
- RetryableException: Transient failures that may succeed on retry (network, 5xx)
- NonRetryableException: Permanent failures that won't benefit from retry (bad data)
- ConfigurationException: Startup/config errors that prevent operation

Concrete exceptions:
- APIException -> RetryableException (network errors, HTTP 5xx / 429)
- RewardsDataException -> NonRetryableException (404, malformed rewards payload)
- GovernanceDataException -> NonRetryableException (malformed votes payload)
- AddressValidationException -> NonRetryableException (bad wallet input)
"""

from typing import Optional


class RetryableException(Exception):
    """
    Base class for exceptions that may succeed on retry.

    Use for transient failures like:
    - Request timeouts
    - Rate limiting
    - Temporary network issues
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NonRetryableException(Exception):
    """
    Base class for exceptions that won't benefit from retry.

    Use for permanent failures like:
    - Invalid input data
    - Missing required data
    - Malformed service payloads
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationException(NonRetryableException):
    """
    Exception for configuration/startup errors.

    Use when:
    - An environment override cannot be parsed
    - Invalid configuration values
    """

    pass


class APIException(RetryableException):
    """
    Exception for transient external API failures.

    Raised for connection errors, timeouts, HTTP 5xx and HTTP 429.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        kind: str = "network",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.kind = kind


class RewardsDataException(NonRetryableException):
    """
    Exception for permanent rewards-service failures.

    Inherits from NonRetryableException because a 404 or a payload that
    fails validation will fail identically on the next attempt.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        kind: str = "parsing",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.kind = kind


class GovernanceDataException(NonRetryableException):
    """Exception for permanent governance-votes failures (4xx, bad payload)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        kind: str = "parsing",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.kind = kind


class AddressValidationException(NonRetryableException):
    """
    Exception for wallet input that is neither a native address nor a
    resolvable herotag. Surfaced at the add-wallet entry point.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        kind: str = "validation",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.kind = kind
