"""
Data Models
===========

Typed data passed through the capture-and-invoke pipeline.

Models:
    Frame:
        - ImageFrame: Immutable still frame as a data URI

    Kinds:
        - AnalysisKind: The five camera-driven features

    Results:
        - Detected / Undetected: Tagged union of classified results
        - StressPayload, PosturePayload, SignLanguagePayload,
          ObjectSpellingPayload, WellnessPayload: Per-kind content
        - StressLevel: Coarse stress band
"""

from wellcam.models.frame import ImageFrame, encode_data_uri, is_data_uri, parse_data_uri
from wellcam.models.kinds import AnalysisKind
from wellcam.models.results import (
    AnalysisResult,
    Detected,
    ObjectSpellingPayload,
    PosturePayload,
    SignLanguagePayload,
    StressLevel,
    StressPayload,
    Undetected,
    WellnessPayload,
    stress_level_for,
)

__all__ = [
    # Frame
    "ImageFrame",
    "encode_data_uri",
    "is_data_uri",
    "parse_data_uri",
    # Kinds
    "AnalysisKind",
    # Results
    "AnalysisResult",
    "Detected",
    "Undetected",
    "StressPayload",
    "PosturePayload",
    "SignLanguagePayload",
    "ObjectSpellingPayload",
    "WellnessPayload",
    "StressLevel",
    "stress_level_for",
]
