"""
Capture Controller
==================

Owns one capture device handle and its lifecycle.

States:
    IDLE → REQUESTING → STREAMING ⇄ CAPTURING
    REQUESTING → FAILED   (device access denied)
    any → STOPPED         (stop())

Generations:
    generation increments on every successful start(). active_generation is
    the current generation while a stream is live and None otherwise, so an
    inference issued before stop() (or before a restart) can be recognized as
    stale when it completes.

Example:
    controller = CaptureController(MockCaptureDevice())

    async with controller.streaming():
        frame = controller.capture()
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Optional

from wellcam.capture.device import CaptureDevice
from wellcam.capture.encoder import encode_jpeg_data_uri
from wellcam.errors import CaptureError, DeviceError
from wellcam.models.frame import ImageFrame


logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    """Lifecycle states of a capture session."""

    IDLE = "IDLE"
    REQUESTING = "REQUESTING"
    STREAMING = "STREAMING"
    CAPTURING = "CAPTURING"
    STOPPED = "STOPPED"
    FAILED = "FAILED"


LIVE_STATES = (CaptureState.STREAMING, CaptureState.CAPTURING)


@dataclass
class CaptureSession:
    """
    Mutable session record owned by one controller.

    Attributes:
        state: Current lifecycle state
        generation: Count of successful starts
        handle: Device handle while streaming, else None
        last_error: Message of the last DeviceError, if any
    """

    state: CaptureState = CaptureState.IDLE
    generation: int = 0
    handle: Optional[Any] = None
    last_error: Optional[str] = None


class CaptureController:
    """
    Capture lifecycle state machine for one device.

    Attributes:
        device: Camera backend
        jpeg_quality: Quality used when encoding snapshots
        session: Current session record
    """

    def __init__(self, device: CaptureDevice, jpeg_quality: int = 90) -> None:
        self.device = device
        self.jpeg_quality = jpeg_quality
        self.session = CaptureSession()
        self._request_id: int = 0

    @property
    def state(self) -> CaptureState:
        return self.session.state

    @property
    def generation(self) -> int:
        return self.session.generation

    @property
    def active_generation(self) -> Optional[int]:
        """Generation of the live stream, or None when not streaming."""
        if self.session.state in LIVE_STATES:
            return self.session.generation
        return None

    @property
    def is_streaming(self) -> bool:
        return self.session.state in LIVE_STATES

    def _transition(self, new_state: CaptureState) -> None:
        old_state = self.session.state
        self.session.state = new_state
        logger.debug(f"Capture state: {old_state.value} → {new_state.value}")

    async def start(self) -> int:
        """
        Acquire the device and begin streaming.

        No-op while already streaming or while a request is pending.

        Returns:
            Current generation

        Raises:
            DeviceError: If access is denied or the device is unavailable
        """
        if self.session.state in LIVE_STATES or self.session.state == CaptureState.REQUESTING:
            logger.debug(f"start() ignored in state {self.session.state.value}")
            return self.session.generation

        self._transition(CaptureState.REQUESTING)
        self.session.last_error = None
        self._request_id += 1
        request_id = self._request_id

        try:
            handle = await asyncio.to_thread(self.device.request_access)
        except Exception as e:
            error = e if isinstance(e, DeviceError) else DeviceError(f"Device unavailable: {e}")
            if not self._is_pending(request_id):
                logger.info(f"Device request failed after stop(): {error.message}")
                return self.session.generation
            self._fail(error)
            if error is e:
                raise
            raise error from e

        # stop() (and possibly another start()) may have run while access was pending
        if not self._is_pending(request_id):
            logger.info("Device granted after stop(); releasing immediately")
            self._release(handle)
            return self.session.generation

        self.session.handle = handle
        self.session.generation += 1
        self._transition(CaptureState.STREAMING)
        logger.info(f"Capture started: generation={self.session.generation}")
        return self.session.generation

    def capture(self) -> ImageFrame:
        """
        Produce one still frame from the current video buffer.

        Returns:
            ImageFrame with a JPEG data URI

        Raises:
            CaptureError: If not streaming or no buffer is available
        """
        if self.session.state != CaptureState.STREAMING:
            raise CaptureError(
                f"Capture requires an active stream (state={self.session.state.value})"
            )

        self._transition(CaptureState.CAPTURING)
        try:
            try:
                pixels = self.device.read_frame(self.session.handle)
            except Exception as e:
                raise CaptureError(f"Frame read failed: {e}") from e

            if pixels is None:
                raise CaptureError("No frame buffer available")

            data_uri = encode_jpeg_data_uri(pixels, quality=self.jpeg_quality)
            return ImageFrame(data_uri=data_uri, captured_at=time.time())
        finally:
            if self.session.state == CaptureState.CAPTURING:
                self._transition(CaptureState.STREAMING)

    def stop(self) -> None:
        """Release the device from any state and invalidate the generation."""
        handle = self.session.handle
        self.session.handle = None
        if handle is not None:
            self._release(handle)

        if self.session.state != CaptureState.STOPPED:
            self._transition(CaptureState.STOPPED)
            logger.info(f"Capture stopped: generation={self.session.generation}")

    def close(self) -> None:
        """Teardown alias for stop()."""
        self.stop()

    @asynccontextmanager
    async def streaming(self) -> AsyncIterator["CaptureController"]:
        """Start on enter, stop on every exit path."""
        await self.start()
        try:
            yield self
        finally:
            self.stop()

    def _is_pending(self, request_id: int) -> bool:
        return self.session.state == CaptureState.REQUESTING and request_id == self._request_id

    def _release(self, handle: Any) -> None:
        try:
            self.device.release_access(handle)
        except Exception as e:
            logger.warning(f"Device release failed: {e}")

    def _fail(self, error: DeviceError) -> None:
        self.session.last_error = error.message
        self._transition(CaptureState.FAILED)
        logger.warning(f"Capture start failed: {error.message}")
