"""
Frame Encoder
=============

Dedicated module for turning raw pixel buffers into image data URIs.

Design Rules:
    - This is the ONLY place in the codebase that encodes images
    - Validates shape and dtype before encoding
    - Fails fast with CaptureError on unusable buffers
"""

import logging

import cv2
import numpy as np

from wellcam.errors import CaptureError
from wellcam.models.frame import encode_data_uri


logger = logging.getLogger(__name__)


def encode_jpeg_data_uri(pixels: np.ndarray, quality: int = 90) -> str:
    """
    Encode a BGR (or grayscale) buffer as a JPEG data URI.

    Args:
        pixels: Image as np.ndarray (H, W, 3) or (H, W), dtype=uint8
        quality: JPEG quality 1-100

    Returns:
        'data:image/jpeg;base64,...' string

    Raises:
        CaptureError: If the buffer is empty, malformed or fails to encode
    """
    if pixels is None or not isinstance(pixels, np.ndarray) or pixels.size == 0:
        raise CaptureError("No frame buffer available")

    if pixels.dtype != np.uint8:
        raise CaptureError(f"Invalid frame dtype: {pixels.dtype}")

    if pixels.ndim not in (2, 3) or (pixels.ndim == 3 and pixels.shape[2] not in (1, 3)):
        raise CaptureError(f"Invalid frame shape: {pixels.shape}")

    ok, buffer = cv2.imencode(
        ".jpg",
        pixels,
        [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)],
    )
    if not ok:
        raise CaptureError("JPEG encoding failed: cv2.imencode returned False")

    return encode_data_uri(buffer.tobytes(), "image/jpeg")
