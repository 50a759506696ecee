"""
Error Taxonomy Tests
====================
"""

import pytest


class TestErrorKinds:
    """Tests for the failure hierarchy."""

    @pytest.mark.parametrize("name,kind,retryable", [
        ("DeviceError", "DeviceError", True),
        ("CaptureError", "CaptureError", True),
        ("ValidationError", "ValidationError", False),
        ("EngineError", "EngineError", True),
    ])
    def test_kind_and_retry_flag(self, name, kind, retryable):
        """Verify each failure carries its kind, retry flag and message."""
        from wellcam import errors

        error = getattr(errors, name)("something went wrong")

        assert isinstance(error, errors.WellcamError)
        assert error.kind.value == kind
        assert error.retryable is retryable
        assert error.message == "something went wrong"
        assert str(error) == "something went wrong"

    def test_session_busy_is_not_an_outcome(self):
        """Verify SessionBusyError stays outside the rendered failure hierarchy."""
        from wellcam.errors import SessionBusyError, WellcamError

        error = SessionBusyError("stress analysis already in progress")

        assert isinstance(error, RuntimeError)
        assert not isinstance(error, WellcamError)
        assert SessionBusyError.__doc__.startswith("Raised when an analysis is requested")
