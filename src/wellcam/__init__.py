"""
WellCam
=======

Camera-driven inference features sharing one capture-and-invoke pipeline.

Each feature (facial stress, posture, sign language, object spelling,
wellness observation) captures a still frame from a live camera, sends it to
a generative inference engine under a strict schema contract, and presents a
detected, undetected or failed outcome.

Components:
    - capture: Camera lifecycle state machine and frame encoding
    - contracts: Per-kind request/response schemas and policies
    - engine: Pluggable inference backends (mock, Gemini)
    - flows: Contract-enforcing invoker and per-feature sessions
    - presenter: Outcome → view model mapping

Example:
    from wellcam.capture import CaptureController, MockCaptureDevice
    from wellcam.engine import MockInferenceEngine
    from wellcam.flows import AnalysisSession, FlowInvoker
    from wellcam.models import AnalysisKind

    session = AnalysisSession(
        AnalysisKind.STRESS,
        CaptureController(MockCaptureDevice()),
        FlowInvoker(MockInferenceEngine()),
    )
    await session.start()
    view = await session.analyze()
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
