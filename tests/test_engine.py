"""
Engine Tests
============

Mock engine scripting and the Gemini engine against a fake client.
"""

import asyncio
import json
from types import SimpleNamespace

import pytest


def make_request(**kwargs):
    from wellcam.contracts.schemas import StressResponse
    from wellcam.engine.base import EngineRequest

    defaults = {"kind": "stress", "prompt": "Rate stress.", "response_model": StressResponse}
    defaults.update(kwargs)
    return EngineRequest(**defaults)


class FakeModels:
    """Stands in for client.aio.models."""

    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def gemini_with(models):
    from wellcam.engine.gemini import GeminiInferenceEngine

    engine = GeminiInferenceEngine(model="gemini-test", api_key="test-key")
    engine._client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return engine


class TestMockEngine:
    """Tests for MockInferenceEngine."""

    def test_default_reply_and_recording(self, mock_engine):
        """Verify canned replies and request recording."""
        reply = asyncio.run(mock_engine.generate(make_request()))

        assert reply["isRelevant"] is True
        assert mock_engine.call_count == 1
        assert mock_engine.get_metrics()["api_call_count"] == 1

    def test_unscripted_kind(self, mock_engine):
        """Verify an unknown kind without a script raises."""
        with pytest.raises(KeyError):
            asyncio.run(mock_engine.generate(make_request(kind="unknown")))

    def test_callable_reply_sees_request(self, mock_engine):
        """Verify callable replies receive the request."""
        mock_engine.script("stress", lambda request: {"isRelevant": False, "analysis": request.prompt})

        reply = asyncio.run(mock_engine.generate(make_request()))

        assert reply == {"isRelevant": False, "analysis": "Rate stress."}

    def test_request_repr_hides_image(self, sample_data_uri):
        """Verify the request repr does not dump the image."""
        request = make_request(image_data_uri=sample_data_uri)

        assert sample_data_uri not in repr(request)


class TestGeminiEngine:
    """Tests for GeminiInferenceEngine with a fake SDK client."""

    def test_parses_json_reply(self, sample_data_uri):
        """Verify the image part, prompt and schema are sent and JSON is parsed."""
        models = FakeModels(text=json.dumps({"isRelevant": True, "stressScore": 12, "analysis": "ok"}))
        engine = gemini_with(models)

        reply = asyncio.run(engine.generate(make_request(image_data_uri=sample_data_uri)))

        assert reply["stressScore"] == 12
        call = models.calls[0]
        assert call["model"] == "gemini-test"
        assert len(call["contents"]) == 2
        assert call["contents"][-1] == "Rate stress."
        assert call["config"].response_mime_type == "application/json"
        assert call["config"].response_schema is not None
        assert engine.get_metrics()["api_call_count"] == 1

    def test_options_appended_to_prompt(self):
        """Verify options are forwarded as preferences text."""
        models = FakeModels(text="{}")
        engine = gemini_with(models)

        asyncio.run(engine.generate(make_request(options={"tone": "gentle"})))

        assert models.calls[0]["contents"] == ['Rate stress.\n\nPreferences: {"tone": "gentle"}']

    @pytest.mark.parametrize("models", [
        FakeModels(error=RuntimeError("quota exceeded")),
        FakeModels(text="not json"),
        FakeModels(text="[1, 2]"),
    ])
    def test_failures_are_engine_errors(self, models):
        """Verify SDK failures and non-object output raise EngineError."""
        from wellcam.errors import EngineError

        engine = gemini_with(models)

        with pytest.raises(EngineError):
            asyncio.run(engine.generate(make_request()))
        assert engine.get_metrics()["api_error_count"] == 1
