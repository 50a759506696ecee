"""
Analysis Result Models
======================

Validated, classified results of one inference call.

A result is a tagged union, never a flat record with a relevance flag:

    Detected   { kind, payload }            # qualifying subject found
    Undetected { kind, reason, fixed }      # nothing suitable found

Undetected carries no content fields at all, so "not relevant implies empty
content" holds by construction. Detected payloads require non-empty content,
so "relevant with an empty payload" cannot be constructed either.

Output Contract (Detected, stress):
    {
        "status": "detected",
        "payload": {
            "kind": "stress",
            "score": 72.0,
            "analysis": "Relaxed brow, neutral mouth.",
            "level": "LOW"
        }
    }
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, computed_field

from wellcam.models.kinds import AnalysisKind


class StressLevel(str, Enum):
    """Coarse stress band derived from the 0-100 score."""

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"


LOW_STRESS_MAX = 33.0
MODERATE_STRESS_MAX = 66.0


def stress_level_for(score: float) -> StressLevel:
    """Map a stress score to its band (<=33 low, <=66 moderate, else high)."""
    if score <= LOW_STRESS_MAX:
        return StressLevel.LOW
    if score <= MODERATE_STRESS_MAX:
        return StressLevel.MODERATE
    return StressLevel.HIGH


# =============================================================================
# Payloads
# =============================================================================

class StressPayload(BaseModel):
    """Facial-stress result content."""

    kind: Literal[AnalysisKind.STRESS] = AnalysisKind.STRESS
    score: float = Field(..., ge=0.0, le=100.0, description="Stress score (0-100)")
    analysis: str = Field(..., min_length=1, description="Why the score was given")

    @computed_field
    @property
    def level(self) -> StressLevel:
        return stress_level_for(self.score)


class PosturePayload(BaseModel):
    """Posture result content."""

    kind: Literal[AnalysisKind.POSTURE] = AnalysisKind.POSTURE
    score: float = Field(..., ge=0.0, le=100.0, description="Posture quality (0-100)")
    analysis: str = Field(..., min_length=1, description="Feedback and suggestions")


class SignLanguagePayload(BaseModel):
    """Sign interpretation content."""

    kind: Literal[AnalysisKind.SIGN_LANGUAGE] = AnalysisKind.SIGN_LANGUAGE
    interpreted_text: str = Field(..., min_length=1, description="Text of the sign")


class ObjectSpellingPayload(BaseModel):
    """Object naming and spelling content."""

    kind: Literal[AnalysisKind.OBJECT_SPELLING] = AnalysisKind.OBJECT_SPELLING
    object_name: str = Field(..., min_length=1, description="Name of the object")
    spelling: str = Field(..., min_length=1, description="Letters separated by spaces")

    @computed_field
    @property
    def letters(self) -> List[str]:
        return [ch for ch in self.spelling if not ch.isspace()]


class WellnessPayload(BaseModel):
    """Non-medical visual observation content."""

    kind: Literal[AnalysisKind.WELLNESS_OBSERVATION] = AnalysisKind.WELLNESS_OBSERVATION
    observations: str = Field(..., min_length=1, description="General observations")
    disclaimer: str = Field(..., min_length=1, description="Mandatory disclaimer")


Payload = Annotated[
    Union[
        StressPayload,
        PosturePayload,
        SignLanguagePayload,
        ObjectSpellingPayload,
        WellnessPayload,
    ],
    Field(discriminator="kind"),
]


# =============================================================================
# Results
# =============================================================================

class Detected(BaseModel):
    """A qualifying subject was found; carries the content payload."""

    status: Literal["detected"] = "detected"
    payload: Payload

    @property
    def kind(self) -> AnalysisKind:
        return self.payload.kind

    @property
    def relevant(self) -> bool:
        return True

    @property
    def reason(self) -> Optional[str]:
        return None


class Undetected(BaseModel):
    """
    No qualifying subject was found.

    This is a normal outcome. `fixed` carries canonical values the contract
    mandates regardless of relevance (e.g. a disclaimer).
    """

    status: Literal["undetected"] = "undetected"
    kind: AnalysisKind
    reason: str = Field(..., min_length=1, description="Why nothing was detected")
    fixed: Dict[str, str] = Field(default_factory=dict)

    @property
    def relevant(self) -> bool:
        return False


AnalysisResult = Annotated[Union[Detected, Undetected], Field(discriminator="status")]
