"""
Analysis Kinds
==============

The five camera-driven features that share the capture-and-invoke pipeline.
"""

from enum import Enum


class AnalysisKind(str, Enum):
    """
    Camera-driven inference features.

    Attributes:
        STRESS: Facial-stress scoring (0-100)
        POSTURE: Posture quality scoring (0-100)
        SIGN_LANGUAGE: Single ASL sign interpretation
        OBJECT_SPELLING: Child-friendly object naming and spelling
        WELLNESS_OBSERVATION: General non-medical visual observations
    """

    STRESS = "stress"
    POSTURE = "posture"
    SIGN_LANGUAGE = "sign_language"
    OBJECT_SPELLING = "object_spelling"
    WELLNESS_OBSERVATION = "wellness_observation"
