"""
Inference Contracts
===================

Per-kind contract definitions consumed by the FlowInvoker.

Each contract declares:
    - input_model: request schema (one required image data URI)
    - response_model: raw engine response schema
    - payload_model + payload_fields: how a relevant response becomes content
    - relevance_field / reason_fields: how the relevance gate reads a response
    - bounds: numeric ranges and what to do when they are violated
    - fixed_fields: values always overwritten with a canonical constant

Declared Score Policies:
    stress  -> CLAMP   (engine schema never bounded the score)
    posture -> REJECT  (engine schema declares 0-100)

Example:
    from wellcam.contracts import CONTRACTS
    from wellcam.models import AnalysisKind

    contract = CONTRACTS[AnalysisKind.POSTURE]
    print(contract.bounds[0].policy)   # ScorePolicy.REJECT
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Type

from pydantic import BaseModel

from wellcam.contracts.schemas import (
    ImageInput,
    ObjectSpellingResponse,
    PostureResponse,
    SignLanguageResponse,
    StressResponse,
    WellnessResponse,
)
from wellcam.models.kinds import AnalysisKind
from wellcam.models.results import (
    ObjectSpellingPayload,
    PosturePayload,
    SignLanguagePayload,
    StressPayload,
    WellnessPayload,
)


WELLNESS_DISCLAIMER = (
    "This is a demonstration of visual observation AI and is NOT a medical "
    "diagnosis. Always consult a healthcare professional for any health concerns."
)

GENERIC_UNDETECTED_REASON = "No suitable subject was found in the image."


class ScorePolicy(str, Enum):
    """What to do with a numeric value outside its declared bounds."""

    CLAMP = "clamp"
    REJECT = "reject"


@dataclass(frozen=True)
class NumericBound:
    """Declared range for one numeric response field."""

    field: str
    minimum: float
    maximum: float
    policy: ScorePolicy = ScorePolicy.REJECT

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum

    def clamp(self, value: float) -> float:
        return min(self.maximum, max(self.minimum, value))


@dataclass(frozen=True)
class InferenceContract:
    """
    Schema contract for one analysis kind.

    Attributes:
        kind: Analysis kind this contract serves
        flow_name: Name sent to the engine to identify the flow
        prompt: Instruction text for the generative engine
        response_model: Raw engine response schema
        payload_model: Content model for a Detected result
        payload_fields: Mapping of payload field -> response field
        relevance_field: Boolean response field driving the relevance gate
        reason_fields: Response fields checked in order for an undetected reason
        fallback_reason: Reason used when the engine supplies none
        bounds: Declared numeric ranges with their policies
        fixed_fields: Response field -> canonical value, always overwritten
        input_model: Request schema
        options_model: Schema for kind-specific options (None = no options)
    """

    kind: AnalysisKind
    flow_name: str
    prompt: str
    response_model: Type[BaseModel]
    payload_model: Type[BaseModel]
    payload_fields: Mapping[str, str]
    relevance_field: str
    reason_fields: Tuple[str, ...]
    fallback_reason: str = GENERIC_UNDETECTED_REASON
    bounds: Tuple[NumericBound, ...] = ()
    fixed_fields: Mapping[str, str] = field(default_factory=dict)
    input_model: Type[BaseModel] = ImageInput
    options_model: Optional[Type[BaseModel]] = None

    def bound_for(self, field_name: str) -> Optional[NumericBound]:
        for bound in self.bounds:
            if bound.field == field_name:
                return bound
        return None

    def with_policy(self, field_name: str, policy: ScorePolicy) -> "InferenceContract":
        """Return a copy with the policy of one bound replaced."""
        if self.bound_for(field_name) is None:
            raise KeyError(f"{self.kind.value} declares no bound for '{field_name}'")
        bounds = tuple(
            replace(b, policy=policy) if b.field == field_name else b
            for b in self.bounds
        )
        return replace(self, bounds=bounds)


# =============================================================================
# Prompts
# =============================================================================

STRESS_PROMPT = """You analyze the facial expression of the person in a photo to estimate their stress level.
Give a stressScore from 0 (no visible stress) to 100 (very high stress) and a short analysis explaining the score.
If the photo does not show a face, set isRelevant to false and explain why in the analysis."""

POSTURE_PROMPT = """You are an expert in posture assessment.
If a person is clearly visible and suitable for posture analysis:
1. Set isRelevant to true.
2. Give a postureScore from 0 (very poor) to 100 (excellent).
3. Give a detailed analysis with good points, problems and specific, actionable suggestions.
If no person is visible, the image is unclear, or it is unsuitable (e.g. only a face, an object):
1. Set isRelevant to false.
2. Set postureScore to 0.
3. Explain briefly in the analysis why posture could not be assessed (e.g. "No person detected")."""

SIGN_LANGUAGE_PROMPT = """You interpret American Sign Language (ASL) from a single still image.
Focus on clear, common handshapes and isolated signs.
If a recognizable ASL sign is present, set isSignDetected to true and give its interpretedText (e.g. "Hello", "Thank you", "A").
Otherwise set isSignDetected to false, set interpretedText to an empty string and give a brief reasonIfNotDetected
(e.g. "No clear ASL sign detected.", "Gesture is ambiguous.", "Image quality too low for interpretation.")."""

OBJECT_SPELLING_PROMPT = """You help children learn to spell.
Identify the main common, child-friendly object in the image.
If one is found, set isObjectDetected to true, give its objectName (e.g. "Apple") and its spelling with each
letter separated by a space (e.g. "A P P L E").
If none is found or the image is unsuitable (blurry, abstract, a face instead of an object), set isObjectDetected
to false, set objectName and spelling to empty strings and give a brief reasonIfNotDetected."""

WELLNESS_PROMPT = f"""You demonstrate general, NON-MEDICAL visual observation of a face.
Never diagnose or name any illness or medical condition.
If a face is clearly visible, set isFaceDetected to true and describe what you see in observations. Look for
paler skin or lips, a swollen face, drooping mouth corners or eyelids, red eyes, patchy skin or a tired look.
If several of these are noticeable, describe them and add: "If you are feeling unwell or have concerns about these
observations, it is advisable to seek medical attention." Otherwise describe the general appearance only.
If no face is visible or the image is unsuitable, set isFaceDetected to false and explain briefly in observations.
Always put this exact text in the disclaimer field: "{WELLNESS_DISCLAIMER}"."""


# =============================================================================
# Registry
# =============================================================================

STRESS_CONTRACT = InferenceContract(
    kind=AnalysisKind.STRESS,
    flow_name="analyzeStressFlow",
    prompt=STRESS_PROMPT,
    response_model=StressResponse,
    payload_model=StressPayload,
    payload_fields={"score": "stress_score", "analysis": "analysis"},
    relevance_field="is_relevant",
    reason_fields=("analysis",),
    fallback_reason="The captured image does not seem to show a face.",
    bounds=(NumericBound("stress_score", 0.0, 100.0, ScorePolicy.CLAMP),),
)

POSTURE_CONTRACT = InferenceContract(
    kind=AnalysisKind.POSTURE,
    flow_name="analyzePostureFlow",
    prompt=POSTURE_PROMPT,
    response_model=PostureResponse,
    payload_model=PosturePayload,
    payload_fields={"score": "posture_score", "analysis": "analysis"},
    relevance_field="is_relevant",
    reason_fields=("analysis",),
    fallback_reason="The image was not suitable for posture analysis.",
    bounds=(NumericBound("posture_score", 0.0, 100.0, ScorePolicy.REJECT),),
)

SIGN_LANGUAGE_CONTRACT = InferenceContract(
    kind=AnalysisKind.SIGN_LANGUAGE,
    flow_name="interpretSignLanguageFlow",
    prompt=SIGN_LANGUAGE_PROMPT,
    response_model=SignLanguageResponse,
    payload_model=SignLanguagePayload,
    payload_fields={"interpreted_text": "interpreted_text"},
    relevance_field="is_sign_detected",
    reason_fields=("reason_if_not_detected",),
    fallback_reason="Could not interpret the sign. Try a clearer gesture or better lighting.",
)

OBJECT_SPELLING_CONTRACT = InferenceContract(
    kind=AnalysisKind.OBJECT_SPELLING,
    flow_name="detectObjectAndSpellFlow",
    prompt=OBJECT_SPELLING_PROMPT,
    response_model=ObjectSpellingResponse,
    payload_model=ObjectSpellingPayload,
    payload_fields={"object_name": "object_name", "spelling": "spelling"},
    relevance_field="is_object_detected",
    reason_fields=("reason_if_not_detected",),
    fallback_reason="Could not detect a suitable object. Try a different object or angle.",
)

WELLNESS_CONTRACT = InferenceContract(
    kind=AnalysisKind.WELLNESS_OBSERVATION,
    flow_name="observeWellnessFlow",
    prompt=WELLNESS_PROMPT,
    response_model=WellnessResponse,
    payload_model=WellnessPayload,
    payload_fields={"observations": "observations", "disclaimer": "disclaimer"},
    relevance_field="is_face_detected",
    reason_fields=("observations",),
    fallback_reason="No clear face detected for observation.",
    fixed_fields={"disclaimer": WELLNESS_DISCLAIMER},
)

CONTRACTS: Dict[AnalysisKind, InferenceContract] = {
    contract.kind: contract
    for contract in (
        STRESS_CONTRACT,
        POSTURE_CONTRACT,
        SIGN_LANGUAGE_CONTRACT,
        OBJECT_SPELLING_CONTRACT,
        WELLNESS_CONTRACT,
    )
}


def build_contracts(
    stress_score_policy: ScorePolicy = ScorePolicy.CLAMP,
    posture_score_policy: ScorePolicy = ScorePolicy.REJECT,
) -> Dict[AnalysisKind, InferenceContract]:
    """
    Build the contract registry with configured score policies.

    Args:
        stress_score_policy: Policy for out-of-range stress scores
        posture_score_policy: Policy for out-of-range posture scores

    Returns:
        Mapping of analysis kind to contract
    """
    contracts = dict(CONTRACTS)
    contracts[AnalysisKind.STRESS] = STRESS_CONTRACT.with_policy(
        "stress_score", ScorePolicy(stress_score_policy)
    )
    contracts[AnalysisKind.POSTURE] = POSTURE_CONTRACT.with_policy(
        "posture_score", ScorePolicy(posture_score_policy)
    )
    return contracts
