"""
Capture Devices
===============

Boundary to the physical camera.

    request_access()        -> handle | DeviceError
    release_access(handle)  -> None
    read_frame(handle)      -> np.ndarray | None

The controller treats handles as opaque. request_access() may block (camera
permission, driver start-up) and is run off the event loop by the controller;
read_frame() is a quick synchronous read of the current buffer.

Components:
    - CaptureDevice: Protocol for camera backends
    - OpenCVCaptureDevice: Webcam via cv2.VideoCapture
    - MockCaptureDevice: Deterministic synthetic frames for testing
"""

import logging
import sys
from typing import Any, Optional, Protocol

import cv2
import numpy as np

from wellcam.errors import DeviceError


logger = logging.getLogger(__name__)


class CaptureDevice(Protocol):
    """Protocol for camera backends."""

    def request_access(self) -> Any:
        """Acquire the device and return an opaque handle."""
        ...

    def release_access(self, handle: Any) -> None:
        """Release a handle returned by request_access()."""
        ...

    def read_frame(self, handle: Any) -> Optional[np.ndarray]:
        """Return the current BGR buffer, or None if none is available."""
        ...


class OpenCVCaptureDevice:
    """
    Webcam capture through OpenCV.

    Attributes:
        index: Camera index
        width: Requested frame width (0 = driver default)
        height: Requested frame height (0 = driver default)
    """

    def __init__(self, index: int = 0, width: int = 0, height: int = 0) -> None:
        self.index = index
        self.width = width
        self.height = height

    def request_access(self) -> cv2.VideoCapture:
        """Open the camera; raise DeviceError if it cannot be opened."""
        # DirectShow keeps index order consistent with enumerated devices on Windows
        if sys.platform == "win32":
            cap = cv2.VideoCapture(self.index, cv2.CAP_DSHOW)
        else:
            cap = cv2.VideoCapture(self.index)

        if not cap.isOpened():
            cap.release()
            raise DeviceError(
                f"Could not access camera {self.index}. "
                "Ensure permissions are granted and the camera is not in use."
            )

        if self.width > 0:
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        if self.height > 0:
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        logger.info(f"Camera {self.index} opened")
        return cap

    def release_access(self, handle: cv2.VideoCapture) -> None:
        handle.release()
        logger.info(f"Camera {self.index} released")

    def read_frame(self, handle: cv2.VideoCapture) -> Optional[np.ndarray]:
        if not handle.isOpened():
            return None
        ok, frame = handle.read()
        return frame if ok else None


class MockCaptureDevice:
    """
    Deterministic synthetic camera for testing.

    Produces a gradient image whose brightness shifts with each read, so
    consecutive frames differ but runs are reproducible.

    Attributes:
        width: Frame width
        height: Frame height
        deny_access: When True, request_access() raises DeviceError
        connected: When False, read_frame() returns None
        open_handles: Handles acquired and not yet released
    """

    def __init__(
        self,
        width: int = 64,
        height: int = 48,
        deny_access: bool = False,
    ) -> None:
        self.width = width
        self.height = height
        self.deny_access = deny_access
        self.connected = True

        self.open_handles: set = set()
        self.access_count: int = 0
        self.release_count: int = 0
        self._frame_counter: int = 0

    def request_access(self) -> int:
        if self.deny_access:
            raise DeviceError("Camera permission denied")
        self.access_count += 1
        handle = self.access_count
        self.open_handles.add(handle)
        return handle

    def release_access(self, handle: int) -> None:
        self.open_handles.discard(handle)
        self.release_count += 1

    def read_frame(self, handle: int) -> Optional[np.ndarray]:
        if not self.connected or handle not in self.open_handles:
            return None

        self._frame_counter += 1
        row = np.linspace(0, 255, self.width, dtype=np.float32)
        gray = np.tile(row, (self.height, 1))
        gray = (gray + self._frame_counter * 7) % 256
        return np.repeat(gray.astype(np.uint8)[:, :, None], 3, axis=2)

    def disconnect(self) -> None:
        """Simulate the camera disappearing mid-stream."""
        self.connected = False
