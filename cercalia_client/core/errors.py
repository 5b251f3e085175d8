"""
Error taxonomy for Cercalia requests.

Every failure raised by the core is a CercaliaError tagged with an ErrorKind:
- TRANSIENT: HTTP status errors, connection failures, undecodable bodies
- STRUCTURAL: response decodes but lacks the root wrapper
- DOMAIN: the service answered with an error node
- VALIDATION: a required scalar (coordinate) could not be parsed
- CANCELLED: the caller cancelled the operation while waiting to retry

Only TRANSIENT errors are retried.
"""

from enum import Enum
from typing import Optional

NO_RESULTS_CODE = "30006"


class ErrorKind(str, Enum):
    """Failure category driving the retry decision."""
    TRANSIENT = "transient"
    STRUCTURAL = "structural"
    DOMAIN = "domain"
    VALIDATION = "validation"
    CANCELLED = "cancelled"


class CercaliaError(Exception):
    """
    Error raised by the Cercalia client.

    Attributes:
        message: Human-readable description
        kind: Failure category
        code: Machine code reported by the service (domain errors only)
        operation: Label of the operation that failed
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.TRANSIENT,
        code: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.code = code
        self.operation = operation

    def __str__(self) -> str:
        if self.operation:
            return f"[{self.operation}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return (
            f"CercaliaError(kind={self.kind.value!r}, code={self.code!r}, "
            f"operation={self.operation!r}, message={self.message!r})"
        )

    @property
    def retryable(self) -> bool:
        return self.kind is ErrorKind.TRANSIENT

    @property
    def is_no_results(self) -> bool:
        """True when the service reported that the query matched nothing."""
        return self.code == NO_RESULTS_CODE

    @classmethod
    def transient(cls, message: str, operation: Optional[str] = None) -> "CercaliaError":
        return cls(message, ErrorKind.TRANSIENT, operation=operation)

    @classmethod
    def structural(cls, message: str, operation: Optional[str] = None) -> "CercaliaError":
        return cls(message, ErrorKind.STRUCTURAL, operation=operation)

    @classmethod
    def domain(
        cls,
        message: str,
        code: Optional[str],
        operation: Optional[str] = None,
    ) -> "CercaliaError":
        return cls(message, ErrorKind.DOMAIN, code=code, operation=operation)

    @classmethod
    def validation(cls, message: str) -> "CercaliaError":
        return cls(message, ErrorKind.VALIDATION)

    @classmethod
    def cancelled(cls, message: str, operation: Optional[str] = None) -> "CercaliaError":
        return cls(message, ErrorKind.CANCELLED, operation=operation)


def classify_error(error: BaseException) -> Optional[ErrorKind]:
    """
    Classify an exception raised by a unit of work.

    CercaliaError carries its own kind. Any other Exception (httpx errors,
    JSON decode errors, timeouts) is transient. BaseExceptions that are not
    Exceptions (KeyboardInterrupt, SystemExit) are not classified.
    """
    if isinstance(error, CercaliaError):
        return error.kind
    if isinstance(error, Exception):
        return ErrorKind.TRANSIENT
    return None


def is_retryable(error: BaseException) -> bool:
    return classify_error(error) is ErrorKind.TRANSIENT


def is_no_results(error: BaseException) -> bool:
    """Check whether an exception is the service's "no results" answer."""
    return isinstance(error, CercaliaError) and error.is_no_results
