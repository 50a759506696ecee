"""
Mock Inference Engine
=====================

Deterministic, scriptable engine for tests and offline development.

Replies are looked up by request kind. A reply can be:
    - a mapping: returned as the raw response
    - an exception instance: raised from generate()
    - a callable: called with the request, its return value used as above

When no reply is scripted for a kind, a canned "detected" response is
returned so the full pipeline can run without network access.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from wellcam.engine.base import EngineRequest


logger = logging.getLogger(__name__)


Reply = Union[Mapping[str, Any], BaseException, Callable[[EngineRequest], Any]]


DEFAULT_REPLIES: Dict[str, Mapping[str, Any]] = {
    "stress": {
        "isRelevant": True,
        "stressScore": 28,
        "analysis": "Relaxed brow and a neutral mouth suggest low stress.",
    },
    "posture": {
        "isRelevant": True,
        "postureScore": 74,
        "analysis": "Upright torso; shoulders slightly rounded. Pull them back gently.",
    },
    "sign_language": {
        "isSignDetected": True,
        "interpretedText": "Hello",
    },
    "object_spelling": {
        "isObjectDetected": True,
        "objectName": "Apple",
        "spelling": "A P P L E",
    },
    "wellness_observation": {
        "isFaceDetected": True,
        "observations": "Appears alert. Skin tone appears even. Eyes seem clear.",
        "disclaimer": "",
    },
    "mood_boosters": {
        "suggestions": [
            {"type": "joke", "content": "Why did the scarecrow win an award? He was outstanding in his field."},
            {"type": "affirmation", "content": "You are doing better than you think."},
            {"type": "music", "content": "Weightless by Marconi Union"},
        ],
    },
}


class MockInferenceEngine:
    """
    Scriptable engine returning canned or scripted replies.

    Attributes:
        replies: Scripted replies by request kind
        delay: Seconds to sleep before replying
        gate: Optional event every call waits on before replying
        requests: Every request received, in order
    """

    def __init__(
        self,
        replies: Optional[Mapping[str, Reply]] = None,
        delay: float = 0.0,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        """
        Initialize mock engine.

        Args:
            replies: Scripted replies keyed by request kind
            delay: Artificial latency in seconds
            gate: Event to wait on before replying (simulates a pending call)
        """
        self.replies: Dict[str, Reply] = dict(replies or {})
        self.delay = delay
        self.gate = gate
        self.requests: List[EngineRequest] = []

        logger.info(
            f"MockInferenceEngine initialized: scripted={sorted(self.replies)}, "
            f"delay={delay}s"
        )

    def script(self, kind: str, reply: Reply) -> None:
        """Set the reply for one kind."""
        self.replies[kind] = reply

    async def generate(self, request: EngineRequest) -> Mapping[str, Any]:
        """Return the scripted reply for the request kind."""
        self.requests.append(request)

        if self.gate is not None:
            await self.gate.wait()
        if self.delay > 0:
            await asyncio.sleep(self.delay)

        reply = self.replies.get(request.kind, DEFAULT_REPLIES.get(request.kind))
        if reply is None:
            raise KeyError(f"No reply scripted for kind '{request.kind}'")

        if callable(reply) and not isinstance(reply, BaseException):
            reply = reply(request)
        if isinstance(reply, BaseException):
            raise reply

        logger.debug(f"Mock engine reply: kind={request.kind}")
        return dict(reply) if isinstance(reply, Mapping) else reply

    @property
    def call_count(self) -> int:
        """Total calls received."""
        return len(self.requests)

    def get_metrics(self) -> dict:
        """Get engine metrics for observability."""
        return {
            "backend": "mock",
            "api_call_count": self.call_count,
            "api_error_count": 0,
        }
