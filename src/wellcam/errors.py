"""
Error Taxonomy
==============

Typed failures surfaced by the capture-and-invoke pipeline.

Every failure the UI must be able to render carries an ErrorKind and a
retryable flag. An undetected subject is NOT an error and never appears here.

Kinds:
    - DeviceError: camera permission denied or device unavailable
    - CaptureError: no frame buffer available (stream not running, device lost)
    - ValidationError: request or response violated its contract
    - EngineError: remote inference call failed or timed out
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Discriminator for failures shown to the UI."""

    DEVICE_ERROR = "DeviceError"
    CAPTURE_ERROR = "CaptureError"
    VALIDATION_ERROR = "ValidationError"
    ENGINE_ERROR = "EngineError"


class WellcamError(Exception):
    """Base class for all pipeline failures."""

    kind: ErrorKind
    retryable: bool = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DeviceError(WellcamError):
    """Raised when the capture device cannot be acquired."""

    kind = ErrorKind.DEVICE_ERROR


class CaptureError(WellcamError):
    """Raised when no frame can be produced from the stream."""

    kind = ErrorKind.CAPTURE_ERROR


class ValidationError(WellcamError):
    """Raised when a request or response violates its contract."""

    kind = ErrorKind.VALIDATION_ERROR
    retryable = False


class EngineError(WellcamError):
    """Raised when the inference engine call fails or times out."""

    kind = ErrorKind.ENGINE_ERROR


class SessionBusyError(RuntimeError):
    """Raised when an analysis is requested while another is in flight."""
