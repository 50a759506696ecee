"""
Mood Boosters
=============

Text-only flow that turns a stress score into mood-boosting suggestions.

Input Contract:
    {"stressScore": 72, "preferences": ["joke", "music"]}

Output Contract:
    {"suggestions": [{"type": "joke", "content": "..."}, ...]}

Suggestions of preferred types are listed first; relative order within each
group is kept.
"""

import asyncio
import logging
from typing import Iterable, List, Optional

import pydantic

from wellcam.contracts.schemas import (
    MoodBoosterRequest,
    MoodBoosterResponse,
    Suggestion,
    SuggestionType,
)
from wellcam.engine.base import EngineRequest, InferenceEngine
from wellcam.errors import EngineError, ValidationError
from wellcam.flows.invoker import describe_validation_error


logger = logging.getLogger(__name__)


MOOD_BOOSTER_FLOW = "mood_boosters"

MOOD_BOOSTER_PROMPT = """You are a mood-boosting assistant.
Given a user's stress score (0-100) and optional preferences, suggest a varied list of jokes, positive
affirmations and calming music recommendations. Match the intensity to the stress level: the higher the
score, the more soothing and supportive the suggestions. If preferences are given, favor those types.
Return each suggestion with a type (joke, affirmation or music) and its content.

Stress Score: {stress_score}
Preferences: {preferences}"""


def order_by_preference(
    suggestions: Iterable[Suggestion],
    preferences: Optional[List[SuggestionType]],
) -> List[Suggestion]:
    """Stable-sort suggestions so preferred types come first."""
    suggestions = list(suggestions)
    if not preferences:
        return suggestions
    preferred = set(preferences)
    return sorted(suggestions, key=lambda s: s.type not in preferred)


async def suggest_mood_boosters(
    engine: InferenceEngine,
    stress_score: float,
    preferences: Optional[List[str]] = None,
    timeout: float = 30.0,
) -> List[Suggestion]:
    """
    Generate mood-boosting suggestions for a stress score.

    Args:
        engine: Inference backend
        stress_score: Score between 0 and 100
        preferences: Optional preferred suggestion types
        timeout: Seconds before the engine call is abandoned

    Returns:
        Validated suggestions, preferred types first

    Raises:
        ValidationError: Invalid request or response
        EngineError: Engine call failed or timed out
    """
    try:
        request = MoodBoosterRequest(stress_score=stress_score, preferences=preferences)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid mood booster request: {describe_validation_error(e)}") from e

    preference_text = (
        ", ".join(p.value for p in request.preferences)
        if request.preferences
        else "No specific preferences"
    )
    engine_request = EngineRequest(
        kind=MOOD_BOOSTER_FLOW,
        prompt=MOOD_BOOSTER_PROMPT.format(
            stress_score=round(request.stress_score),
            preferences=preference_text,
        ),
        response_model=MoodBoosterResponse,
    )

    try:
        raw = await asyncio.wait_for(engine.generate(engine_request), timeout=timeout)
    except asyncio.TimeoutError:
        raise EngineError(f"Mood booster generation timed out after {timeout:.1f}s")
    except EngineError:
        raise
    except Exception as e:
        raise EngineError(f"Mood booster generation failed: {e}") from e

    try:
        response = MoodBoosterResponse.model_validate(raw)
    except pydantic.ValidationError as e:
        raise ValidationError(
            f"Mood booster response violates schema: {describe_validation_error(e)}"
        ) from e

    logger.info(
        f"Mood boosters generated: score={request.stress_score:g}, "
        f"count={len(response.suggestions)}"
    )
    return order_by_preference(response.suggestions, request.preferences)
