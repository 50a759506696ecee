"""
Contracts Module
================

Schema contracts between the pipeline and the generative inference engine.

Components:
    - ImageInput: Request schema (one image data URI)
    - *Response: Raw per-kind engine response schemas
    - InferenceContract: Bounds, fixed fields and relevance gate per kind
    - CONTRACTS / build_contracts: Registry of contracts by AnalysisKind
"""

from wellcam.contracts.registry import (
    CONTRACTS,
    GENERIC_UNDETECTED_REASON,
    WELLNESS_DISCLAIMER,
    InferenceContract,
    NumericBound,
    ScorePolicy,
    build_contracts,
)
from wellcam.contracts.schemas import (
    ImageInput,
    MoodBoosterRequest,
    MoodBoosterResponse,
    ObjectSpellingResponse,
    PostureResponse,
    SignLanguageResponse,
    StressResponse,
    Suggestion,
    SuggestionType,
    WellnessResponse,
)

__all__ = [
    "CONTRACTS",
    "GENERIC_UNDETECTED_REASON",
    "WELLNESS_DISCLAIMER",
    "InferenceContract",
    "NumericBound",
    "ScorePolicy",
    "build_contracts",
    "ImageInput",
    "StressResponse",
    "PostureResponse",
    "SignLanguageResponse",
    "ObjectSpellingResponse",
    "WellnessResponse",
    "MoodBoosterRequest",
    "MoodBoosterResponse",
    "Suggestion",
    "SuggestionType",
]
