"""
Contract Tests
==============

Contract registry, schemas and result models.
"""

import pytest


class TestRegistry:
    """Tests for the contract registry."""

    def test_every_kind_has_a_contract(self):
        """Verify each analysis kind maps to a matching contract."""
        from wellcam.contracts.registry import CONTRACTS
        from wellcam.models.kinds import AnalysisKind

        assert set(CONTRACTS) == set(AnalysisKind)
        for kind, contract in CONTRACTS.items():
            assert contract.kind == kind
            assert contract.prompt
            assert contract.fallback_reason

    def test_declared_score_policies(self):
        """Verify stress clamps and posture rejects by default."""
        from wellcam.contracts.registry import CONTRACTS, ScorePolicy
        from wellcam.models.kinds import AnalysisKind

        assert CONTRACTS[AnalysisKind.STRESS].bound_for("stress_score").policy == ScorePolicy.CLAMP
        assert CONTRACTS[AnalysisKind.POSTURE].bound_for("posture_score").policy == ScorePolicy.REJECT

    def test_wellness_disclaimer_is_fixed(self):
        """Verify the wellness contract pins the disclaimer."""
        from wellcam.contracts.registry import CONTRACTS, WELLNESS_DISCLAIMER
        from wellcam.models.kinds import AnalysisKind

        contract = CONTRACTS[AnalysisKind.WELLNESS_OBSERVATION]
        assert contract.fixed_fields == {"disclaimer": WELLNESS_DISCLAIMER}
        assert WELLNESS_DISCLAIMER in contract.prompt

    def test_build_contracts_overrides_policies(self):
        """Verify configured policies replace the declared ones."""
        from wellcam.contracts.registry import CONTRACTS, ScorePolicy, build_contracts
        from wellcam.models.kinds import AnalysisKind

        contracts = build_contracts(
            stress_score_policy=ScorePolicy.REJECT,
            posture_score_policy="clamp",
        )

        assert contracts[AnalysisKind.STRESS].bound_for("stress_score").policy == ScorePolicy.REJECT
        assert contracts[AnalysisKind.POSTURE].bound_for("posture_score").policy == ScorePolicy.CLAMP
        # The shared registry is untouched
        assert CONTRACTS[AnalysisKind.STRESS].bound_for("stress_score").policy == ScorePolicy.CLAMP

    def test_with_policy_unknown_field(self):
        """Verify replacing a policy on an undeclared field fails."""
        from wellcam.contracts.registry import SIGN_LANGUAGE_CONTRACT, ScorePolicy

        with pytest.raises(KeyError):
            SIGN_LANGUAGE_CONTRACT.with_policy("score", ScorePolicy.CLAMP)

    def test_numeric_bound(self):
        """Verify contains and clamp."""
        from wellcam.contracts.registry import NumericBound

        bound = NumericBound("score", 0.0, 100.0)
        assert bound.contains(0.0)
        assert bound.contains(100.0)
        assert not bound.contains(100.5)
        assert bound.clamp(150.0) == 100.0
        assert bound.clamp(-3.0) == 0.0


class TestSchemas:
    """Tests for wire schemas."""

    def test_image_input_accepts_alias(self, sample_data_uri):
        """Verify the camelCase wire name is accepted."""
        from wellcam.contracts.schemas import ImageInput

        parsed = ImageInput.model_validate({"photoDataUri": sample_data_uri})
        assert parsed.photo_data_uri == sample_data_uri

    def test_image_input_rejects_extra_fields(self, sample_data_uri):
        """Verify the input has exactly one field."""
        import pydantic

        from wellcam.contracts.schemas import ImageInput

        with pytest.raises(pydantic.ValidationError):
            ImageInput.model_validate({"photoDataUri": sample_data_uri, "other": 1})

    def test_image_input_rejects_plain_text(self):
        """Verify a non data URI is rejected."""
        import pydantic

        from wellcam.contracts.schemas import ImageInput

        with pytest.raises(pydantic.ValidationError):
            ImageInput.model_validate({"photoDataUri": "https://example.com/cat.jpg"})

    def test_response_ignores_unknown_fields(self):
        """Verify extra engine fields are dropped."""
        from wellcam.contracts.schemas import StressResponse

        response = StressResponse.model_validate(
            {"isRelevant": True, "stressScore": 10, "analysis": "ok", "confidence": 0.9}
        )
        assert response.stress_score == 10
        assert not hasattr(response, "confidence")

    def test_response_requires_relevance_flag(self):
        """Verify the relevance flag is mandatory."""
        import pydantic

        from wellcam.contracts.schemas import PostureResponse

        with pytest.raises(pydantic.ValidationError):
            PostureResponse.model_validate({"postureScore": 50, "analysis": "fine"})

    def test_score_required_only_when_relevant(self):
        """Verify scores are mandatory for relevant replies and optional otherwise."""
        import pydantic

        from wellcam.contracts.schemas import PostureResponse, StressResponse

        assert StressResponse.model_validate({"isRelevant": False}).stress_score is None
        assert PostureResponse.model_validate({"isRelevant": False}).posture_score is None

        with pytest.raises(pydantic.ValidationError):
            StressResponse.model_validate({"isRelevant": True, "analysis": "calm"})
        with pytest.raises(pydantic.ValidationError):
            PostureResponse.model_validate({"isRelevant": True, "analysis": "upright"})

    def test_mood_booster_request_bounds(self):
        """Verify the mood-booster score is bounded to 0-100."""
        import pydantic

        from wellcam.contracts.schemas import MoodBoosterRequest

        assert MoodBoosterRequest(stressScore=100).stress_score == 100
        with pytest.raises(pydantic.ValidationError):
            MoodBoosterRequest(stressScore=101)


class TestResultModels:
    """Tests for the Detected / Undetected union."""

    def test_stress_level_bands(self):
        """Verify score bands."""
        from wellcam.models.results import StressLevel, stress_level_for

        assert stress_level_for(0) == StressLevel.LOW
        assert stress_level_for(33) == StressLevel.LOW
        assert stress_level_for(34) == StressLevel.MODERATE
        assert stress_level_for(66) == StressLevel.MODERATE
        assert stress_level_for(67) == StressLevel.HIGH

    def test_detected_requires_content(self):
        """Verify an empty payload cannot be constructed."""
        import pydantic

        from wellcam.models.results import SignLanguagePayload

        with pytest.raises(pydantic.ValidationError):
            SignLanguagePayload(interpreted_text="")

    def test_undetected_requires_reason(self):
        """Verify an undetected result always carries a reason."""
        import pydantic

        from wellcam.models.kinds import AnalysisKind
        from wellcam.models.results import Undetected

        with pytest.raises(pydantic.ValidationError):
            Undetected(kind=AnalysisKind.POSTURE, reason="")

    def test_union_dispatches_on_status_and_kind(self):
        """Verify serialized results parse back into the right variant."""
        from pydantic import TypeAdapter

        from wellcam.models.results import AnalysisResult, Detected, ObjectSpellingPayload

        adapter = TypeAdapter(AnalysisResult)
        result = adapter.validate_python({
            "status": "detected",
            "payload": {"kind": "object_spelling", "object_name": "Cup", "spelling": "C U P"},
        })

        assert isinstance(result, Detected)
        assert isinstance(result.payload, ObjectSpellingPayload)
        assert result.payload.letters == ["C", "U", "P"]
        assert result.relevant is True
        assert result.reason is None
