"""
Analysis Session
================

Generic capture-and-invoke state machine, instantiated once per analysis kind.

Every camera feature follows the same shape:

    start()    → acquire camera                 (DeviceError → FailedView)
    analyze()  → capture frame                  (CaptureError → FailedView)
               → invoke contract-enforced flow  (tagged with generation)
               → presenter accepts or discards the outcome
    stop()     → release camera, clear the view

Concurrency:
    At most one analysis is in flight per session. A second analyze() while
    one is outstanding is rejected with SessionBusyError; it is neither
    queued nor coalesced. stop() is always safe; the outstanding call's
    outcome is discarded when it completes.
"""

import logging
from typing import Any, Mapping, Optional

from wellcam.capture.controller import CaptureController
from wellcam.errors import CaptureError, DeviceError, SessionBusyError, WellcamError
from wellcam.flows.invoker import FlowInvoker
from wellcam.models.kinds import AnalysisKind
from wellcam.presenter import Outcome, ResultPresenter, TaggedOutcome, ViewModel


logger = logging.getLogger(__name__)


class AnalysisSession:
    """
    One feature's capture session, invoker and current view.

    Attributes:
        kind: Analysis kind served by this session
        controller: Capture lifecycle owner
        invoker: Contract-enforcing engine wrapper
        presenter: Current view holder
    """

    def __init__(
        self,
        kind: AnalysisKind,
        controller: CaptureController,
        invoker: FlowInvoker,
    ) -> None:
        self.kind = AnalysisKind(kind)
        self.controller = controller
        self.invoker = invoker
        self.presenter = ResultPresenter(self.kind)

        self._in_flight_generation: Optional[int] = None

    @property
    def view(self) -> Optional[ViewModel]:
        return self.presenter.current

    @property
    def busy(self) -> bool:
        """True while an analysis issued under the live stream is outstanding."""
        return (
            self._in_flight_generation is not None
            and self._in_flight_generation == self.controller.active_generation
        )

    async def start(self) -> Optional[ViewModel]:
        """
        Start the camera.

        Returns:
            Current view (a FailedView if the device could not be acquired,
            None once a new stream has started)
        """
        previous_generation = self.controller.generation
        try:
            await self.controller.start()
        except DeviceError as e:
            return self.presenter.show(e)

        if self.controller.generation != previous_generation:
            self.presenter.clear()
        return self.presenter.current

    async def analyze(self, options: Optional[Mapping[str, Any]] = None) -> Optional[ViewModel]:
        """
        Capture one frame and run the analysis.

        Args:
            options: Kind-specific preferences

        Returns:
            Current view after the outcome was accepted or discarded

        Raises:
            SessionBusyError: If an analysis is already in flight
        """
        if self.busy:
            raise SessionBusyError(f"{self.kind.value} analysis already in progress")

        try:
            frame = self.controller.capture()
        except CaptureError as e:
            return self.presenter.show(e)

        generation = self.controller.generation
        self._in_flight_generation = generation
        outcome: Outcome
        try:
            outcome = await self.invoker.invoke(self.kind, frame, options)
        except WellcamError as e:
            outcome = e
        finally:
            if self._in_flight_generation == generation:
                self._in_flight_generation = None

        self.presenter.accept(
            TaggedOutcome(generation=generation, outcome=outcome),
            self.controller.active_generation,
        )
        return self.presenter.current

    def stop(self) -> None:
        """Stop the camera and clear the current view."""
        self.controller.stop()
        self.presenter.clear()

    def close(self) -> None:
        """Teardown alias for stop()."""
        self.stop()

    def snapshot(self) -> dict:
        """Session state for the UI collaborator."""
        view = self.presenter.current
        return {
            "kind": self.kind.value,
            "state": self.controller.state.value,
            "generation": self.controller.generation,
            "busy": self.busy,
            "last_error": self.controller.session.last_error,
            "view": view.model_dump(mode="json") if view is not None else None,
        }
