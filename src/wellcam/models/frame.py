"""
Image Frame Model
=================

Immutable still frame produced by the capture controller.

A frame carries its image as a MIME-typed, base64-encoded data URI, which is
exactly the shape the inference contracts accept:

    data:<mimetype>;base64,<encoded_data>

Design Rules:
    - Frames are never mutated once produced
    - The data URI is not decoded here beyond shape checks
"""

import base64
import binascii
import re
import time
from dataclasses import dataclass, field
from typing import Tuple


DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>image/[A-Za-z0-9.+-]+);base64,(?P<data>[A-Za-z0-9+/]+={0,2})$"
)


def is_data_uri(value: str) -> bool:
    """Check whether a string has the image data-URI shape."""
    return isinstance(value, str) and DATA_URI_PATTERN.match(value) is not None


def encode_data_uri(content: bytes, mime_type: str = "image/jpeg") -> str:
    """Build a data URI from raw encoded image bytes."""
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_data_uri(value: str) -> Tuple[str, bytes]:
    """
    Split a data URI into its MIME type and decoded bytes.

    Args:
        value: Data URI string

    Returns:
        Tuple of (mime_type, content_bytes)

    Raises:
        ValueError: If the string is not a base64 image data URI
    """
    match = DATA_URI_PATTERN.match(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError("Expected 'data:<image mimetype>;base64,<data>'")

    try:
        content = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}")

    return match.group("mime"), content


@dataclass(frozen=True, slots=True)
class ImageFrame:
    """
    Still frame captured from a live video feed.

    Attributes:
        data_uri: MIME-typed, base64-encoded image
        captured_at: UNIX timestamp of the capture
    """

    data_uri: str
    captured_at: float = field(default_factory=time.time)

    @property
    def mime_type(self) -> str:
        """MIME type declared by the data URI."""
        match = DATA_URI_PATTERN.match(self.data_uri)
        return match.group("mime") if match else ""

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the full image."""
        return (
            f"ImageFrame(mime={self.mime_type or '?'}, "
            f"size={len(self.data_uri)}, "
            f"captured_at={self.captured_at:.3f})"
        )
