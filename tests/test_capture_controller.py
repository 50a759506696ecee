"""
Capture Controller Tests
========================

Lifecycle, generations and device handle ownership.
"""

import asyncio
import threading

import pytest


class BlockingDevice:
    """Mock camera whose access request blocks until released by the test."""

    def __init__(self):
        from wellcam.capture.device import MockCaptureDevice

        self.inner = MockCaptureDevice()
        self.requested = threading.Event()
        self.grant = threading.Event()

    def request_access(self):
        self.requested.set()
        self.grant.wait(timeout=5)
        return self.inner.request_access()

    def release_access(self, handle):
        self.inner.release_access(handle)

    def read_frame(self, handle):
        return self.inner.read_frame(handle)


class TestStart:
    """Tests for start()."""

    def test_start_streams_and_bumps_generation(self, mock_device):
        """Verify a successful start enters STREAMING with generation 1."""
        from wellcam.capture.controller import CaptureController, CaptureState

        controller = CaptureController(mock_device)
        assert controller.state == CaptureState.IDLE
        assert controller.active_generation is None

        generation = asyncio.run(controller.start())

        assert generation == 1
        assert controller.state == CaptureState.STREAMING
        assert controller.active_generation == 1
        assert len(mock_device.open_handles) == 1

    def test_start_twice_is_noop(self, mock_device):
        """Verify start() while streaming keeps the handle and generation."""
        from wellcam.capture.controller import CaptureController

        controller = CaptureController(mock_device)

        async def run():
            await controller.start()
            await controller.start()

        asyncio.run(run())

        assert controller.generation == 1
        assert mock_device.access_count == 1

    def test_denied_access_fails_then_recovers(self):
        """Verify denial moves to FAILED and a later start can succeed."""
        from wellcam.capture.controller import CaptureController, CaptureState
        from wellcam.capture.device import MockCaptureDevice
        from wellcam.errors import DeviceError

        device = MockCaptureDevice(deny_access=True)
        controller = CaptureController(device)

        with pytest.raises(DeviceError):
            asyncio.run(controller.start())

        assert controller.state == CaptureState.FAILED
        assert controller.session.last_error == "Camera permission denied"
        assert controller.generation == 0

        device.deny_access = False
        asyncio.run(controller.start())

        assert controller.state == CaptureState.STREAMING
        assert controller.generation == 1
        assert controller.session.last_error is None

    def test_unexpected_device_failure_wrapped(self):
        """Verify non-DeviceError failures surface as DeviceError."""
        from wellcam.capture.controller import CaptureController, CaptureState
        from wellcam.capture.device import MockCaptureDevice
        from wellcam.errors import DeviceError

        device = MockCaptureDevice()

        def broken():
            raise OSError("driver crashed")

        device.request_access = broken
        controller = CaptureController(device)

        with pytest.raises(DeviceError) as exc_info:
            asyncio.run(controller.start())
        assert "driver crashed" in exc_info.value.message
        assert controller.state == CaptureState.FAILED


class TestCapture:
    """Tests for capture()."""

    def test_capture_while_idle_raises(self, mock_device):
        """Verify capture without a stream raises CaptureError."""
        from wellcam.capture.controller import CaptureController, CaptureState
        from wellcam.errors import CaptureError

        controller = CaptureController(mock_device)

        with pytest.raises(CaptureError):
            controller.capture()
        assert controller.state == CaptureState.IDLE

    def test_capture_produces_jpeg_frame(self, mock_device):
        """Verify capture returns a JPEG frame and stays STREAMING."""
        from wellcam.capture.controller import CaptureController, CaptureState
        from wellcam.models.frame import is_data_uri

        controller = CaptureController(mock_device)
        asyncio.run(controller.start())

        frame = controller.capture()

        assert is_data_uri(frame.data_uri)
        assert frame.mime_type == "image/jpeg"
        assert controller.state == CaptureState.STREAMING
        assert controller.generation == 1

    def test_consecutive_frames_differ(self, mock_device):
        """Verify each capture reads a fresh buffer."""
        from wellcam.capture.controller import CaptureController

        controller = CaptureController(mock_device)
        asyncio.run(controller.start())

        assert controller.capture().data_uri != controller.capture().data_uri

    def test_disconnected_device_raises_and_keeps_streaming(self, mock_device):
        """Verify a lost buffer raises CaptureError without leaving the stream."""
        from wellcam.capture.controller import CaptureController, CaptureState
        from wellcam.errors import CaptureError

        controller = CaptureController(mock_device)
        asyncio.run(controller.start())
        mock_device.disconnect()

        with pytest.raises(CaptureError):
            controller.capture()
        assert controller.state == CaptureState.STREAMING

    def test_capture_after_stop_raises(self, mock_device):
        """Verify capture is refused once stopped."""
        from wellcam.capture.controller import CaptureController
        from wellcam.errors import CaptureError

        controller = CaptureController(mock_device)
        asyncio.run(controller.start())
        controller.stop()

        with pytest.raises(CaptureError):
            controller.capture()


class TestStop:
    """Tests for stop() and handle release."""

    def test_stop_releases_handle(self, mock_device):
        """Verify stop releases the device and clears the active generation."""
        from wellcam.capture.controller import CaptureController, CaptureState

        controller = CaptureController(mock_device)
        asyncio.run(controller.start())
        controller.stop()

        assert controller.state == CaptureState.STOPPED
        assert controller.active_generation is None
        assert controller.generation == 1
        assert mock_device.open_handles == set()
        assert mock_device.release_count == 1

    def test_stop_is_idempotent(self, mock_device):
        """Verify repeated stop() releases only once."""
        from wellcam.capture.controller import CaptureController

        controller = CaptureController(mock_device)
        asyncio.run(controller.start())
        controller.stop()
        controller.stop()

        assert mock_device.release_count == 1

    def test_restart_bumps_generation(self, mock_device):
        """Verify stop then start yields a new generation."""
        from wellcam.capture.controller import CaptureController

        controller = CaptureController(mock_device)

        async def run():
            await controller.start()
            controller.stop()
            return await controller.start()

        assert asyncio.run(run()) == 2
        assert controller.active_generation == 2
        assert len(mock_device.open_handles) == 1

    def test_stop_during_pending_start_releases_late_grant(self):
        """Verify a grant arriving after stop() is released and never streams."""
        from wellcam.capture.controller import CaptureController, CaptureState

        device = BlockingDevice()
        controller = CaptureController(device)

        async def run():
            task = asyncio.create_task(controller.start())
            await asyncio.to_thread(device.requested.wait, 5)
            assert controller.state == CaptureState.REQUESTING

            controller.stop()
            device.grant.set()
            return await task

        generation = asyncio.run(run())

        assert generation == 0
        assert controller.state == CaptureState.STOPPED
        assert device.inner.open_handles == set()
        assert device.inner.release_count == 1

    def test_streaming_context_stops_on_error(self, mock_device):
        """Verify the streaming() context releases the device on exceptions."""
        from wellcam.capture.controller import CaptureController, CaptureState

        controller = CaptureController(mock_device)

        async def run():
            async with controller.streaming():
                controller.capture()
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            asyncio.run(run())

        assert controller.state == CaptureState.STOPPED
        assert mock_device.open_handles == set()
