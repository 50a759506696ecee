"""
Frame Tests
===========

Data URI helpers, ImageFrame and the JPEG encoder.
"""

import numpy as np
import pytest


class TestDataUri:
    """Tests for data URI helpers."""

    def test_encode_then_parse(self):
        """Verify parse recovers the MIME type and bytes."""
        from wellcam.models.frame import encode_data_uri, parse_data_uri

        uri = encode_data_uri(b"abc123", "image/png")
        assert uri.startswith("data:image/png;base64,")

        mime, content = parse_data_uri(uri)
        assert mime == "image/png"
        assert content == b"abc123"

    @pytest.mark.parametrize("value", [
        "",
        "not a uri",
        "data:text/plain;base64,aGVsbG8=",
        "data:image/jpeg,aGVsbG8=",
        "data:image/jpeg;base64,",
        "data:image/jpeg;base64,@@@@",
    ])
    def test_malformed_rejected(self, value):
        """Verify malformed URIs are rejected."""
        from wellcam.models.frame import is_data_uri, parse_data_uri

        assert not is_data_uri(value)
        with pytest.raises(ValueError):
            parse_data_uri(value)

    def test_bad_padding_rejected(self):
        """Verify base64 that matches the shape but cannot decode is rejected."""
        from wellcam.models.frame import parse_data_uri

        with pytest.raises(ValueError):
            parse_data_uri("data:image/jpeg;base64,abc")


class TestImageFrame:
    """Tests for ImageFrame."""

    def test_frame_is_immutable(self, sample_frame):
        """Verify frames cannot be mutated."""
        import dataclasses

        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_frame.data_uri = "data:image/png;base64,AAAA"

    def test_mime_type_and_repr(self, sample_frame):
        """Verify mime type is read from the URI and repr stays compact."""
        assert sample_frame.mime_type == "image/jpeg"
        text = repr(sample_frame)
        assert "image/jpeg" in text
        assert sample_frame.data_uri not in text


class TestEncoder:
    """Tests for the JPEG encoder."""

    def test_encodes_color_frame(self):
        """Verify a BGR frame becomes a decodable JPEG data URI."""
        from wellcam.capture.encoder import encode_jpeg_data_uri
        from wellcam.models.frame import parse_data_uri

        pixels = np.zeros((24, 32, 3), dtype=np.uint8)
        pixels[:, :16] = 200

        mime, content = parse_data_uri(encode_jpeg_data_uri(pixels))
        assert mime == "image/jpeg"
        assert content[:2] == b"\xff\xd8"

    def test_encodes_grayscale_frame(self):
        """Verify a 2D frame is accepted."""
        from wellcam.capture.encoder import encode_jpeg_data_uri

        uri = encode_jpeg_data_uri(np.full((8, 8), 128, dtype=np.uint8), quality=50)
        assert uri.startswith("data:image/jpeg;base64,")

    @pytest.mark.parametrize("pixels", [
        None,
        np.zeros((0, 0, 3), dtype=np.uint8),
        np.zeros((8, 8, 3), dtype=np.float32),
        np.zeros((8, 8, 4, 2), dtype=np.uint8),
        np.zeros((8, 8, 2), dtype=np.uint8),
    ])
    def test_unusable_buffers_raise_capture_error(self, pixels):
        """Verify empty or malformed buffers raise CaptureError."""
        from wellcam.capture.encoder import encode_jpeg_data_uri
        from wellcam.errors import CaptureError, ErrorKind

        with pytest.raises(CaptureError) as exc_info:
            encode_jpeg_data_uri(pixels)
        assert exc_info.value.kind == ErrorKind.CAPTURE_ERROR
