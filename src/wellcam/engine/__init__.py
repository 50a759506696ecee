"""
Engine Module
=============

Pluggable generative inference backends.

The pipeline treats the engine as a black box that maps a request to a raw,
unvalidated response. All contract enforcement happens in the FlowInvoker.

Components:
    - InferenceEngine: Protocol for inference backends
    - EngineRequest: One call to the engine
    - MockInferenceEngine: Scriptable engine for testing
    - GeminiInferenceEngine: Google Gen AI backend (production)
"""

from wellcam.engine.base import EngineRequest, InferenceEngine
from wellcam.engine.gemini import GeminiInferenceEngine
from wellcam.engine.mock import DEFAULT_REPLIES, MockInferenceEngine

__all__ = [
    "EngineRequest",
    "InferenceEngine",
    "MockInferenceEngine",
    "GeminiInferenceEngine",
    "DEFAULT_REPLIES",
]
