"""
Capture Module
==============

Camera lifecycle and still-frame snapshots.

Components:
    - CaptureController: Lifecycle state machine for one device
    - CaptureState / CaptureSession: Controller state
    - CaptureDevice: Protocol for camera backends
    - OpenCVCaptureDevice: Webcam via OpenCV (production)
    - MockCaptureDevice: Synthetic frames (testing)
    - encode_jpeg_data_uri: Pixel buffer → JPEG data URI
"""

from wellcam.capture.controller import CaptureController, CaptureSession, CaptureState
from wellcam.capture.device import CaptureDevice, MockCaptureDevice, OpenCVCaptureDevice
from wellcam.capture.encoder import encode_jpeg_data_uri

__all__ = [
    "CaptureController",
    "CaptureSession",
    "CaptureState",
    "CaptureDevice",
    "MockCaptureDevice",
    "OpenCVCaptureDevice",
    "encode_jpeg_data_uri",
]
