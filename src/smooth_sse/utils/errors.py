"""
Error types for smooth-sse.

Malformed SSE text and unrecognized payloads are never errors: the decoder
drops what it cannot use and the smoother passes events through. The
exceptions here cover misconfiguration and misuse of the stream objects.
"""

from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification."""
    CONFIGURATION = "configuration"
    STREAM = "stream"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Context information for an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    component: Optional[str] = None
    operation: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class SmoothSSEError(Exception):
    """Base exception for all smooth-sse errors."""

    code: str = "SMOOTH_SSE_ERROR"
    default_message: str = "An error occurred in smooth-sse"
    severity: ErrorSeverity = ErrorSeverity.ERROR
    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message or self.default_message
        self.context = context or ErrorContext()
        self.cause = cause
        super().__init__(self.message)

    def get_suggestions(self) -> List[str]:
        """Get error resolution suggestions."""
        return []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "severity": self.severity.value,
                "category": self.category.value,
                "suggestions": self.get_suggestions(),
                "context": {
                    "timestamp": self.context.timestamp.isoformat(),
                    "component": self.context.component,
                    "operation": self.context.operation,
                    "metadata": self.context.metadata,
                },
            }
        }


class ConfigurationError(SmoothSSEError):
    """Configuration errors."""
    code = "CONFIG_ERROR"
    default_message = "Configuration error"
    category = ErrorCategory.CONFIGURATION

    def get_suggestions(self) -> List[str]:
        return [
            "Check your configuration file syntax",
            "Check SMOOTH_SSE_* environment variables",
        ]


class StreamError(SmoothSSEError):
    """Misuse of an event stream."""
    code = "STREAM_ERROR"
    default_message = "Event stream error"
    category = ErrorCategory.STREAM


class TransportError(StreamError):
    """The HTTP response cannot be read as an event stream."""
    code = "TRANSPORT_ERROR"
    default_message = "Response is not an event stream"
    category = ErrorCategory.TRANSPORT

    def get_suggestions(self) -> List[str]:
        return [
            "Check that the request asked for streaming output",
            "Check the response Content-Type header",
        ]


__all__ = [
    'SmoothSSEError',
    'ErrorContext',
    'ErrorSeverity',
    'ErrorCategory',
    'ConfigurationError',
    'StreamError',
    'TransportError',
]
