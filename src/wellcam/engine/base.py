"""
Inference Engine Protocol
=========================

Boundary to the opaque generative inference capability.

The pipeline hands the engine one EngineRequest and receives a raw,
unvalidated mapping back. Everything about how the engine reasons is out of
scope; the FlowInvoker validates whatever comes back.

Design Rules:
    - Engines never validate or normalize responses
    - Engine failures surface as raised exceptions
    - Engines are async; blocking SDKs run in a worker thread
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol, Type

from pydantic import BaseModel


@dataclass(frozen=True)
class EngineRequest:
    """
    One call to the inference engine.

    Attributes:
        kind: Flow identifier (analysis kind value or auxiliary flow name)
        prompt: Instruction text
        response_model: Schema the engine is asked to produce
        image_data_uri: Photo as a data URI (None for text-only flows)
        options: Kind-specific preferences forwarded to the prompt
    """

    kind: str
    prompt: str
    response_model: Type[BaseModel]
    image_data_uri: Optional[str] = None
    options: Mapping[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the full image."""
        size = len(self.image_data_uri) if self.image_data_uri else 0
        return (
            f"EngineRequest(kind={self.kind}, "
            f"image_size={size}, "
            f"options={dict(self.options)})"
        )


class InferenceEngine(Protocol):
    """
    Protocol for inference backends.

    This interface is implemented by:
        - MockInferenceEngine (tests and offline development)
        - GeminiInferenceEngine (production)
    """

    async def generate(self, request: EngineRequest) -> Mapping[str, Any]:
        """
        Run one inference call.

        Args:
            request: Prompt, schema and optional image

        Returns:
            Raw response mapping (unvalidated)
        """
        ...
