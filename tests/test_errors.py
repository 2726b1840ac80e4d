"""
Tests for the error hierarchy.
"""

from smooth_sse.utils.errors import (
    SmoothSSEError,
    ConfigurationError,
    StreamError,
    TransportError,
    ErrorContext,
    ErrorCategory,
    ErrorSeverity,
)


class TestErrors:
    """Test error metadata and serialization."""

    def test_default_message(self):
        error = StreamError()
        assert str(error) == "Event stream error"
        assert error.category is ErrorCategory.STREAM

    def test_hierarchy(self):
        assert issubclass(ConfigurationError, SmoothSSEError)
        assert issubclass(TransportError, StreamError)

    def test_to_dict(self):
        cause = ValueError("boom")
        error = ConfigurationError(
            "bad pacing",
            context=ErrorContext(component="config", operation="load", metadata={"key": "x"}),
            cause=cause,
        )

        data = error.to_dict()["error"]
        assert data["code"] == "CONFIG_ERROR"
        assert data["message"] == "bad pacing"
        assert data["severity"] == ErrorSeverity.ERROR.value
        assert data["category"] == "configuration"
        assert data["context"]["component"] == "config"
        assert data["context"]["metadata"] == {"key": "x"}
        assert data["suggestions"]
        assert error.cause is cause
