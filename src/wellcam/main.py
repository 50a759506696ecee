"""
WellCam Main Application
========================

FastAPI entry point exposing the camera analysis features to a UI.

The UI collaborator sends start/capture/stop events per feature and renders
the returned view model (detected, undetected or failed).

Endpoints:
    GET  /                          - Service information
    GET  /health                    - Liveness probe
    GET  /metrics                   - Engine and invoker counters
    GET  /features/{kind}           - Session snapshot
    POST /features/{kind}/start     - Start the camera
    POST /features/{kind}/capture   - Capture a frame and analyze it
    POST /features/{kind}/stop      - Stop the camera, clear the view
    POST /mood-boosters             - Suggestions for a stress score
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from wellcam.config import Settings, settings
from wellcam.errors import EngineError, SessionBusyError, ValidationError
from wellcam.features import FeatureHub
from wellcam.flows.boosters import suggest_mood_boosters
from wellcam.models.kinds import AnalysisKind


logger = logging.getLogger(__name__)


class MoodBoosterBody(BaseModel):
    """Request body for /mood-boosters."""

    stress_score: float = Field(..., description="Stress score (0-100)")
    preferences: Optional[List[str]] = Field(default=None, description="Preferred types")


def create_app(
    app_settings: Settings = settings,
    hub_factory: Optional[Callable[[Settings], FeatureHub]] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Loaded settings
        hub_factory: Builds the feature hub (defaults to FeatureHub.from_settings)

    Returns:
        Configured FastAPI app
    """
    build_hub = hub_factory or FeatureHub.from_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"Starting {app_settings.app.name} {app_settings.app.version}")
        app.state.hub = build_hub(app_settings)
        app.state.startup_time = time.time()
        logger.info(
            f"Backends: camera={app_settings.camera.backend}, "
            f"engine={app_settings.engine.backend}"
        )

        yield

        logger.info("Shutting down gracefully...")
        app.state.hub.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="WellCam",
        description="Camera-driven stress, posture, sign, spelling and wellness analysis",
        version=app_settings.app.version,
        lifespan=lifespan,
    )

    def get_hub(request: Request) -> FeatureHub:
        return request.app.state.hub

    @app.get("/")
    async def root() -> JSONResponse:
        """Service information endpoint."""
        return JSONResponse({
            "service": "WellCam",
            "name": app_settings.app.name,
            "version": app_settings.app.version,
            "status": "running",
            "features": [kind.value for kind in AnalysisKind],
            "camera_backend": app_settings.camera.backend,
            "engine_backend": app_settings.engine.backend,
        })

    @app.get("/health")
    async def health(request: Request) -> JSONResponse:
        """Liveness probe - always 200 while the process is running."""
        return JSONResponse({
            "status": "healthy",
            "uptime_seconds": round(time.time() - request.app.state.startup_time, 1),
        })

    @app.get("/metrics")
    async def metrics(request: Request) -> JSONResponse:
        """Detailed metrics for observability."""
        hub = get_hub(request)
        engine_metrics = {}
        if hasattr(hub.engine, "get_metrics"):
            engine_metrics = hub.engine.get_metrics()
        return JSONResponse({
            "uptime_seconds": round(time.time() - request.app.state.startup_time, 1),
            "engine": engine_metrics,
            "invoker": hub.invoker.get_metrics(),
            "sessions": {
                session.kind.value: {
                    "state": session.controller.state.value,
                    "generation": session.controller.generation,
                    "discarded_results": session.presenter.discarded_count,
                }
                for session in hub
            },
        })

    @app.get("/features/{kind}")
    async def feature_state(kind: AnalysisKind, request: Request) -> JSONResponse:
        """Current session snapshot."""
        return JSONResponse(get_hub(request).session(kind).snapshot())

    @app.post("/features/{kind}/start")
    async def feature_start(kind: AnalysisKind, request: Request) -> JSONResponse:
        """Start the camera for one feature."""
        session = get_hub(request).session(kind)
        await session.start()
        return JSONResponse(session.snapshot())

    @app.post("/features/{kind}/capture")
    async def feature_capture(kind: AnalysisKind, request: Request) -> JSONResponse:
        """Capture a frame and analyze it."""
        session = get_hub(request).session(kind)
        try:
            await session.analyze()
        except SessionBusyError as e:
            return JSONResponse({"error": str(e)}, status_code=409)
        return JSONResponse(session.snapshot())

    @app.post("/features/{kind}/stop")
    async def feature_stop(kind: AnalysisKind, request: Request) -> JSONResponse:
        """Stop the camera for one feature."""
        session = get_hub(request).session(kind)
        session.stop()
        return JSONResponse(session.snapshot())

    @app.post("/mood-boosters")
    async def mood_boosters(body: MoodBoosterBody, request: Request) -> JSONResponse:
        """Generate mood-boosting suggestions."""
        hub = get_hub(request)
        try:
            suggestions = await suggest_mood_boosters(
                hub.engine,
                stress_score=body.stress_score,
                preferences=body.preferences,
                timeout=hub.engine_timeout,
            )
        except ValidationError as e:
            return JSONResponse({"error_kind": e.kind.value, "error": e.message}, status_code=422)
        except EngineError as e:
            return JSONResponse({"error_kind": e.kind.value, "error": e.message}, status_code=502)

        return JSONResponse({
            "suggestions": [s.model_dump(mode="json") for s in suggestions],
        })

    return app


app = create_app()


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "wellcam.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=False,
    )
