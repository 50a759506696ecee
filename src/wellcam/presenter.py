"""
Result Presenter
================

Maps classified outcomes to view models for the UI collaborator.

View Models (discriminated by `status`):
    DetectedView   { kind, payload }
    UndetectedView { kind, reason, fixed }
    FailedView     { kind, error_kind, message, retryable }

present() is pure. ResultPresenter holds the current view for one session
and refuses outcomes tagged with a generation that is no longer active, so a
slow reply for an old stream never overwrites newer state.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field

from wellcam.errors import ErrorKind, WellcamError
from wellcam.models.kinds import AnalysisKind
from wellcam.models.results import Detected, Payload, Undetected


logger = logging.getLogger(__name__)


class DetectedView(BaseModel):
    """Render the payload."""

    status: Literal["detected"] = "detected"
    kind: AnalysisKind
    payload: Payload


class UndetectedView(BaseModel):
    """Render a neutral "nothing found" message."""

    status: Literal["undetected"] = "undetected"
    kind: AnalysisKind
    reason: str
    fixed: Dict[str, str] = Field(default_factory=dict)


class FailedView(BaseModel):
    """Render an error with a retry affordance."""

    status: Literal["failed"] = "failed"
    kind: AnalysisKind
    error_kind: ErrorKind
    message: str
    retryable: bool = True


ViewModel = Annotated[
    Union[DetectedView, UndetectedView, FailedView],
    Field(discriminator="status"),
]

Outcome = Union[Detected, Undetected, WellcamError]


def present(kind: AnalysisKind, outcome: Outcome) -> ViewModel:
    """
    Map an outcome to its view model.

    Args:
        kind: Analysis kind the outcome belongs to
        outcome: Detected, Undetected, or a pipeline failure

    Returns:
        DetectedView, UndetectedView or FailedView
    """
    if isinstance(outcome, Detected):
        return DetectedView(kind=kind, payload=outcome.payload)
    if isinstance(outcome, Undetected):
        return UndetectedView(kind=kind, reason=outcome.reason, fixed=dict(outcome.fixed))
    if isinstance(outcome, WellcamError):
        return FailedView(
            kind=kind,
            error_kind=outcome.kind,
            message=outcome.message,
            retryable=outcome.retryable,
        )
    raise TypeError(f"Cannot present {type(outcome).__name__}")


@dataclass(frozen=True)
class TaggedOutcome:
    """An outcome together with the stream generation it was issued under."""

    generation: int
    outcome: Outcome


class ResultPresenter:
    """
    Current view of one analysis session.

    Attributes:
        kind: Analysis kind of the owning session
        current: Latest accepted view model, or None
        discarded_count: Number of stale outcomes dropped
    """

    def __init__(self, kind: AnalysisKind) -> None:
        self.kind = kind
        self.current: Optional[ViewModel] = None
        self.discarded_count: int = 0

    def show(self, outcome: Outcome) -> ViewModel:
        """Present an outcome unconditionally (synchronous failures)."""
        self.current = present(self.kind, outcome)
        return self.current

    def accept(self, tagged: TaggedOutcome, active_generation: Optional[int]) -> bool:
        """
        Present a tagged outcome if its generation is still active.

        Args:
            tagged: Outcome with the generation it was issued under
            active_generation: Generation of the live stream (None if stopped)

        Returns:
            True if the view was updated, False if the outcome was stale
        """
        if active_generation is None or tagged.generation != active_generation:
            self.discarded_count += 1
            logger.info(
                f"Discarding stale {self.kind.value} result: "
                f"generation={tagged.generation}, active={active_generation}"
            )
            return False

        self.current = present(self.kind, tagged.outcome)
        return True

    def clear(self) -> None:
        self.current = None
