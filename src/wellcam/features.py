"""
Feature Hub
===========

Builds one AnalysisSession per analysis kind from configuration.

Each feature owns its own capture controller, device and contract; nothing
is shared between features except the (stateless) inference engine.

Example:
    from wellcam.config import settings
    from wellcam.features import FeatureHub

    hub = FeatureHub.from_settings(settings)
    session = hub.session(AnalysisKind.POSTURE)
"""

import logging
from typing import Callable, Dict, Iterator, Optional

from wellcam.capture.controller import CaptureController
from wellcam.capture.device import CaptureDevice, MockCaptureDevice, OpenCVCaptureDevice
from wellcam.config import Settings
from wellcam.contracts.registry import build_contracts
from wellcam.engine.base import InferenceEngine
from wellcam.engine.gemini import GeminiInferenceEngine
from wellcam.engine.mock import MockInferenceEngine
from wellcam.flows.invoker import FlowInvoker
from wellcam.flows.session import AnalysisSession
from wellcam.models.kinds import AnalysisKind


logger = logging.getLogger(__name__)


DeviceFactory = Callable[[AnalysisKind], CaptureDevice]


def create_engine(settings: Settings) -> InferenceEngine:
    """
    Create inference engine based on config.

    Fails fast if the backend name is unknown.
    """
    backend = settings.engine.backend

    if backend == "mock":
        logger.info("Using MockInferenceEngine")
        return MockInferenceEngine()

    elif backend == "gemini":
        logger.info(f"Using GeminiInferenceEngine: model={settings.engine.model}")
        return GeminiInferenceEngine(
            model=settings.engine.model,
            api_key=settings.engine.api_key,
            temperature=settings.engine.temperature,
        )

    else:
        raise ValueError(f"Unknown engine backend: {backend}")


def create_device_factory(settings: Settings) -> DeviceFactory:
    """Return a factory producing one capture device per feature."""
    backend = settings.camera.backend
    camera = settings.camera

    if backend == "mock":
        return lambda kind: MockCaptureDevice()

    elif backend == "opencv":
        return lambda kind: OpenCVCaptureDevice(
            index=camera.device_index,
            width=camera.width,
            height=camera.height,
        )

    else:
        raise ValueError(f"Unknown camera backend: {backend}")


class FeatureHub:
    """
    One analysis session per kind.

    Attributes:
        engine: Shared inference backend
        invoker: Contract-enforcing invoker
        sessions: Session by analysis kind
    """

    def __init__(
        self,
        engine: InferenceEngine,
        device_factory: DeviceFactory,
        invoker: Optional[FlowInvoker] = None,
        jpeg_quality: int = 90,
        engine_timeout: float = 30.0,
    ) -> None:
        self.engine = engine
        self.engine_timeout = engine_timeout
        self.invoker = invoker or FlowInvoker(engine, timeout=engine_timeout)
        self.sessions: Dict[AnalysisKind, AnalysisSession] = {
            kind: AnalysisSession(
                kind=kind,
                controller=CaptureController(device_factory(kind), jpeg_quality=jpeg_quality),
                invoker=self.invoker,
            )
            for kind in AnalysisKind
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "FeatureHub":
        engine = create_engine(settings)
        contracts = build_contracts(
            stress_score_policy=settings.contracts.stress_score_policy,
            posture_score_policy=settings.contracts.posture_score_policy,
        )
        invoker = FlowInvoker(engine, contracts=contracts, timeout=settings.engine.timeout_seconds)
        return cls(
            engine=engine,
            device_factory=create_device_factory(settings),
            invoker=invoker,
            jpeg_quality=settings.camera.jpeg_quality,
            engine_timeout=settings.engine.timeout_seconds,
        )

    def session(self, kind: AnalysisKind) -> AnalysisSession:
        return self.sessions[AnalysisKind(kind)]

    def __iter__(self) -> Iterator[AnalysisSession]:
        return iter(self.sessions.values())

    def close(self) -> None:
        """Release every camera."""
        for session in self.sessions.values():
            session.close()
        logger.info("All feature sessions closed")
