"""Exception hierarchy for span type assignment.

Exception Hierarchy:
    SpanTypesError (base)
    ├── ConfigParseError (fatal - fix the rule file)
    │   └── RuleFileNotFoundError (rule file missing)
    ├── InvalidOptionError (fatal - fix the command line / environment)
    ├── DeviceEnumerationError (fatal - device store unavailable)
    └── DeviceWriteError (recoverable per span - run continues)

Fatal errors abort a run before any span is written. DeviceWriteError is
raised by the device store for a single span and is collected by the
``set`` use case so the remaining spans are still processed.
"""
from datetime import datetime, timezone
from typing import Any, Optional


class SpanTypesError(Exception):
    """Base exception for all span type errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "CONFIG_PARSE_ERROR")
        details: Additional context as a dictionary
        timestamp: When the error occurred
        cause: The original exception that caused this error
        recoverable: Whether the run can continue past this error
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        self.cause = cause
        self.recoverable = recoverable

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigParseError(SpanTypesError):
    """Raised when the rule file is missing, unreadable or malformed.

    Attributes:
        path: Rule file path (None when parsing in-memory text)
        line_number: 1-based line of the offending rule, if any
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        line_number: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        if line_number is not None:
            details["line"] = line_number
        super().__init__(
            message,
            code="CONFIG_PARSE_ERROR",
            details=details,
            recoverable=False,
            **kwargs,
        )
        self.path = path
        self.line_number = line_number


class RuleFileNotFoundError(ConfigParseError):
    """Raised when the rule file does not exist.

    A default line mode may replace a missing rule file. Every other
    ConfigParseError stays fatal.
    """


class InvalidOptionError(SpanTypesError):
    """Raised for an unknown identifier key, line mode or other bad option."""

    def __init__(
        self,
        message: str,
        option: Optional[str] = None,
        value: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if option:
            details["option"] = option
        if value is not None:
            details["value"] = value
        super().__init__(
            message,
            code="INVALID_OPTION",
            details=details,
            recoverable=False,
            **kwargs,
        )
        self.option = option
        self.value = value


class DeviceEnumerationError(SpanTypesError):
    """Raised when devices cannot be enumerated (e.g., driver not loaded)."""

    def __init__(self, message: str, root: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if root:
            details["root"] = root
        super().__init__(
            message,
            code="DEVICE_ENUMERATION_ERROR",
            details=details,
            recoverable=False,
            **kwargs,
        )
        self.root = root


class DeviceWriteError(SpanTypesError):
    """Raised when a span type write is rejected by the driver.

    Attributes:
        device_path: Path of the device owning the span
        span_number: Span whose type could not be written
    """

    def __init__(
        self,
        message: str,
        device_path: str,
        span_number: int,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["device"] = device_path
        details["span"] = span_number
        super().__init__(
            message,
            code="DEVICE_WRITE_ERROR",
            details=details,
            recoverable=True,
            **kwargs,
        )
        self.device_path = device_path
        self.span_number = span_number


__all__ = [
    "SpanTypesError",
    "ConfigParseError",
    "RuleFileNotFoundError",
    "InvalidOptionError",
    "DeviceEnumerationError",
    "DeviceWriteError",
]
