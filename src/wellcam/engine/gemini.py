"""
Gemini Inference Engine
=======================

Production inference engine using the Google Gen AI SDK.

This engine:
    - Sends the photo as an inline image part next to the prompt
    - Requests structured JSON matching the contract's response model
    - Returns the parsed JSON mapping WITHOUT validating it
    - Counts calls and errors for observability

Design Rules:
    - Fail fast on misconfiguration (missing API key)
    - Wrap every SDK or parsing failure in EngineError
    - Log all API calls
"""

import json
import logging
import os
from typing import Any, Mapping, Optional

from google import genai
from google.genai import types

from wellcam.engine.base import EngineRequest
from wellcam.errors import EngineError
from wellcam.models.frame import parse_data_uri


logger = logging.getLogger(__name__)


class GeminiInferenceEngine:
    """
    Inference engine backed by a Gemini model.

    Attributes:
        model: Gemini model name
        temperature: Sampling temperature
    """

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        api_key: Optional[str] = None,
        temperature: float = 0.2,
    ) -> None:
        """
        Initialize Gemini engine.

        Args:
            model: Gemini model name
            api_key: API key (falls back to GEMINI_API_KEY / GOOGLE_API_KEY)
            temperature: Sampling temperature

        Raises:
            EngineError: If no API key is available or the client fails
        """
        self.model = model
        self.temperature = temperature

        self._api_call_count: int = 0
        self._api_error_count: int = 0

        api_key = api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not api_key:
            raise EngineError(
                "Gemini backend requested but no API key configured. "
                "Set GEMINI_API_KEY or engine.api_key."
            )

        try:
            self._client = genai.Client(api_key=api_key)
        except Exception as e:
            raise EngineError(f"Failed to initialize Gemini client: {e}")

        logger.info(f"GeminiInferenceEngine initialized: model={model}")

    async def generate(self, request: EngineRequest) -> Mapping[str, Any]:
        """
        Run one structured-output call.

        Args:
            request: Prompt, response schema and optional image

        Returns:
            Parsed JSON mapping from the model

        Raises:
            EngineError: If the call fails or returns non-JSON output
        """
        contents = self._build_contents(request)
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=request.response_model,
            temperature=self.temperature,
        )

        self._api_call_count += 1
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            self._api_error_count += 1
            logger.error(
                f"Gemini API error (kind={request.kind}): {e}. "
                f"Total errors: {self._api_error_count}"
            )
            raise EngineError(f"Inference call failed: {e}")

        text = response.text or ""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            self._api_error_count += 1
            raise EngineError(f"Engine returned non-JSON output: {e}")

        if not isinstance(data, dict):
            self._api_error_count += 1
            raise EngineError(f"Engine returned {type(data).__name__}, expected an object")

        logger.debug(f"Gemini API: kind={request.kind}, keys={sorted(data)}")
        return data

    def _build_contents(self, request: EngineRequest) -> list:
        """Assemble image part and prompt text."""
        prompt = request.prompt
        if request.options:
            prompt += "\n\nPreferences: " + json.dumps(dict(request.options), default=str)

        contents: list = []
        if request.image_data_uri:
            try:
                mime_type, content = parse_data_uri(request.image_data_uri)
            except ValueError as e:
                raise EngineError(f"Cannot send image to engine: {e}")
            contents.append(types.Part.from_bytes(data=content, mime_type=mime_type))
        contents.append(prompt)
        return contents

    @property
    def api_call_count(self) -> int:
        """Total API calls made."""
        return self._api_call_count

    @property
    def api_error_count(self) -> int:
        """Total API errors."""
        return self._api_error_count

    def get_metrics(self) -> dict:
        """Get engine metrics for observability."""
        return {
            "backend": "gemini",
            "model": self.model,
            "api_call_count": self._api_call_count,
            "api_error_count": self._api_error_count,
        }
