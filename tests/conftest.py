"""
Test Configuration
==================

Pytest fixtures and test configuration for WellCam.
"""

import pytest


@pytest.fixture
def sample_data_uri():
    """Provide a small, well-formed image data URI."""
    from wellcam.models.frame import encode_data_uri

    return encode_data_uri(b"\xff\xd8\xff\xe0 not really a jpeg \xff\xd9", "image/jpeg")


@pytest.fixture
def sample_frame(sample_data_uri):
    """Provide an ImageFrame wrapping the sample data URI."""
    from wellcam.models.frame import ImageFrame

    return ImageFrame(data_uri=sample_data_uri, captured_at=1707321234.567)


@pytest.fixture
def mock_device():
    """Provide a mock camera that grants access."""
    from wellcam.capture.device import MockCaptureDevice

    return MockCaptureDevice()


@pytest.fixture
def mock_engine():
    """Provide a mock engine with default replies."""
    from wellcam.engine.mock import MockInferenceEngine

    return MockInferenceEngine()


@pytest.fixture
def invoker(mock_engine):
    """Provide a FlowInvoker over the mock engine with default contracts."""
    from wellcam.flows.invoker import FlowInvoker

    return FlowInvoker(mock_engine, timeout=1.0)
