"""
Contract Schemas
================

Pydantic models for the engine-facing request and response shapes.

Request Contract (all image kinds):
    {
        "photoDataUri": "data:image/jpeg;base64,/9j/4AAQSkZJRg..."
    }

Response Contracts (raw, before enforcement):
    stress:               {"stressScore", "analysis", "isRelevant"}
    posture:              {"postureScore", "analysis", "isRelevant"}
    sign_language:        {"interpretedText", "isSignDetected", "reasonIfNotDetected"}
    object_spelling:      {"objectName", "spelling", "isObjectDetected", "reasonIfNotDetected"}
    wellness_observation: {"isFaceDetected", "observations", "disclaimer"}

Design Rules:
    - Raw responses are validated for types and required scores only;
      numeric bounds and fixed fields are enforced by the FlowInvoker
    - Scores may be absent only when the response is not relevant
    - Field names are snake_case, wire names are camelCase aliases
    - Unknown engine fields are ignored
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from wellcam.models.frame import parse_data_uri


class EngineResponse(BaseModel):
    """Base configuration for raw engine responses."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# =============================================================================
# Input
# =============================================================================

class ImageInput(BaseModel):
    """
    Input schema shared by every image kind.

    Exactly one required field: a photo as a base64 image data URI.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    photo_data_uri: str = Field(
        ...,
        alias="photoDataUri",
        description=(
            "A photo as a data URI that must include a MIME type and use Base64 "
            "encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'."
        ),
    )

    @field_validator("photo_data_uri")
    @classmethod
    def _check_data_uri(cls, value: str) -> str:
        _, content = parse_data_uri(value)
        if not content:
            raise ValueError("Data URI carries an empty image")
        return value


# =============================================================================
# Raw responses
# =============================================================================

class StressResponse(EngineResponse):
    """Raw facial-stress response."""

    stress_score: Optional[float] = Field(
        default=None,
        alias="stressScore",
        allow_inf_nan=False,
        description="Estimated stress level (0-100).",
    )
    analysis: str = Field(
        default="",
        description="Short analysis of the facial expressions.",
    )
    is_relevant: bool = Field(
        ...,
        alias="isRelevant",
        description="Whether the photo shows a face suitable for analysis.",
    )

    @model_validator(mode="after")
    def _require_score_when_relevant(self) -> "StressResponse":
        if self.is_relevant and self.stress_score is None:
            raise ValueError("stressScore is required when isRelevant is true")
        return self


class PostureResponse(EngineResponse):
    """Raw posture response."""

    posture_score: Optional[float] = Field(
        default=None,
        alias="postureScore",
        allow_inf_nan=False,
        description="Estimated posture quality (0-100). 0 is very poor, 100 is excellent.",
    )
    analysis: str = Field(
        default="",
        description="Posture feedback, or why analysis was not possible.",
    )
    is_relevant: bool = Field(
        ...,
        alias="isRelevant",
        description="Whether a person suitable for posture analysis was found.",
    )

    @model_validator(mode="after")
    def _require_score_when_relevant(self) -> "PostureResponse":
        if self.is_relevant and self.posture_score is None:
            raise ValueError("postureScore is required when isRelevant is true")
        return self


class SignLanguageResponse(EngineResponse):
    """Raw sign interpretation response."""

    interpreted_text: str = Field(
        default="",
        alias="interpretedText",
        description="Text equivalent of the detected ASL sign.",
    )
    is_sign_detected: bool = Field(
        ...,
        alias="isSignDetected",
        description="Whether a recognizable sign was detected.",
    )
    reason_if_not_detected: Optional[str] = Field(
        default=None,
        alias="reasonIfNotDetected",
        description="Brief reason when no sign could be interpreted.",
    )


class ObjectSpellingResponse(EngineResponse):
    """Raw object naming and spelling response."""

    object_name: str = Field(
        default="",
        alias="objectName",
        description='Name of the detected object (e.g. "Apple").',
    )
    spelling: str = Field(
        default="",
        description='Spelling with letters separated by spaces (e.g. "A P P L E").',
    )
    is_object_detected: bool = Field(
        ...,
        alias="isObjectDetected",
        description="Whether a suitable, child-friendly object was detected.",
    )
    reason_if_not_detected: Optional[str] = Field(
        default=None,
        alias="reasonIfNotDetected",
        description="Brief reason when no suitable object was found.",
    )


class WellnessResponse(EngineResponse):
    """Raw wellness observation response."""

    is_face_detected: bool = Field(
        ...,
        alias="isFaceDetected",
        description="Whether a face was clearly detected.",
    )
    observations: str = Field(
        default="",
        description="General, non-medical observations, or why none could be made.",
    )
    disclaimer: str = Field(
        default="",
        description="Mandatory disclaimer about the non-medical nature of this feature.",
    )


# =============================================================================
# Mood boosters
# =============================================================================

class SuggestionType(str, Enum):
    """Categories of mood-boosting suggestions."""

    JOKE = "joke"
    AFFIRMATION = "affirmation"
    MUSIC = "music"


class MoodBoosterRequest(BaseModel):
    """Input for mood-booster generation."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    stress_score: float = Field(
        ...,
        alias="stressScore",
        ge=0.0,
        le=100.0,
        allow_inf_nan=False,
        description="The user's stress score, between 0 and 100.",
    )
    preferences: Optional[List[SuggestionType]] = Field(
        default=None,
        description="Optional list of preferred suggestion types.",
    )


class Suggestion(BaseModel):
    """One mood-boosting suggestion."""

    type: SuggestionType = Field(..., description="The type of suggestion.")
    content: str = Field(..., min_length=1, description="The mood-boosting content.")


class MoodBoosterResponse(EngineResponse):
    """Raw mood-booster response."""

    suggestions: List[Suggestion] = Field(
        ...,
        description="An array of mood-boosting suggestions.",
    )
