#!/usr/bin/env python3
"""
Capture Smoke Script
====================

Standalone script to exercise one feature end to end.

This script:
    1. Starts the camera for the chosen feature
    2. Captures and analyzes a number of frames
    3. Logs each view model as it is produced
    4. Reports a final summary

Prerequisites:
    - Install the package: pip install -e .
    - For --engine gemini, set GEMINI_API_KEY

Usage:
    python scripts/smoke_capture.py --kind posture
    python scripts/smoke_capture.py --kind stress --camera opencv --engine gemini --count 3
"""

import argparse
import asyncio
import logging
import sys
import time

from wellcam.config import load_config
from wellcam.features import FeatureHub
from wellcam.models.kinds import AnalysisKind


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


async def run_smoke(
    kind: AnalysisKind,
    camera: str,
    engine: str,
    count: int,
    interval: float,
) -> dict:
    """
    Run the smoke test.

    Args:
        kind: Feature to exercise
        camera: Camera backend name
        engine: Engine backend name
        count: Number of captures
        interval: Seconds between captures

    Returns:
        Summary dict
    """
    settings = load_config()
    settings.camera.backend = camera
    settings.engine.backend = engine

    logger.info("=" * 60)
    logger.info(f"Smoke run: kind={kind.value}, camera={camera}, engine={engine}")
    logger.info("=" * 60)

    hub = FeatureHub.from_settings(settings)
    session = hub.session(kind)
    statuses = {"detected": 0, "undetected": 0, "failed": 0}
    start_time = time.time()

    try:
        view = await session.start()
        if view is not None and view.status == "failed":
            logger.error(f"Camera start failed: {view.message}")
            return {"captures": 0, **statuses}

        for index in range(count):
            view = await session.analyze()
            if view is None:
                logger.warning(f"Capture {index + 1}: result discarded")
                continue
            statuses[view.status] += 1
            logger.info(f"Capture {index + 1}: {view.model_dump_json()}")
            await asyncio.sleep(interval)
    finally:
        hub.close()

    total_time = time.time() - start_time
    logger.info("=" * 60)
    logger.info("FINAL SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Total runtime: {total_time:.1f} seconds")
    for status, total in statuses.items():
        logger.info(f"{status}: {total}")
    logger.info(f"Invoker: {hub.invoker.get_metrics()}")
    logger.info("=" * 60)

    return {"captures": count, **statuses}


def main():
    parser = argparse.ArgumentParser(description="Capture-and-analyze smoke run")
    parser.add_argument(
        "--kind",
        type=AnalysisKind,
        choices=list(AnalysisKind),
        default=AnalysisKind.STRESS,
        help="Feature to exercise (default: stress)",
    )
    parser.add_argument(
        "--camera",
        choices=["mock", "opencv"],
        default="mock",
        help="Camera backend (default: mock)",
    )
    parser.add_argument(
        "--engine",
        choices=["mock", "gemini"],
        default="mock",
        help="Inference backend (default: mock)",
    )
    parser.add_argument("--count", type=int, default=1, help="Number of captures")
    parser.add_argument(
        "--interval",
        type=float,
        default=1.0,
        help="Seconds between captures (default: 1.0)",
    )

    args = parser.parse_args()

    result = asyncio.run(run_smoke(
        kind=args.kind,
        camera=args.camera,
        engine=args.engine,
        count=args.count,
        interval=args.interval,
    ))

    sys.exit(0 if result["failed"] == 0 and result["captures"] > 0 else 1)


if __name__ == "__main__":
    main()
