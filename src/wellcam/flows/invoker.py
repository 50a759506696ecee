"""
Flow Invoker
============

Runs one contract-enforced inference call.

Pipeline:
    1. Validate the frame (and options) against the contract's input schema
    2. Call the engine, bounded by a timeout
    3. Validate the raw response; enforce numeric bounds (reject or clamp)
    4. Overwrite every fixed field with its canonical value
    5. Relevance gate: Undetected (normal outcome) or Detected

Error Mapping:
    - Schema violations (request or response) → ValidationError
    - Engine exceptions and timeouts          → EngineError

The invoker holds no session state; given a frame and a contract it is
referentially transparent apart from the remote call.
"""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import pydantic

from wellcam.contracts.registry import CONTRACTS, InferenceContract, ScorePolicy
from wellcam.engine.base import EngineRequest, InferenceEngine
from wellcam.errors import EngineError, ValidationError, WellcamError
from wellcam.models.frame import ImageFrame
from wellcam.models.kinds import AnalysisKind
from wellcam.models.results import AnalysisResult, Detected, Undetected


logger = logging.getLogger(__name__)


def describe_validation_error(error: pydantic.ValidationError) -> str:
    """Flatten a pydantic error into one readable line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "<root>"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


class FlowInvoker:
    """
    Contract-enforcing wrapper around an inference engine.

    Attributes:
        engine: Inference backend
        contracts: Contract registry by analysis kind
        timeout: Seconds before an engine call is abandoned
    """

    def __init__(
        self,
        engine: InferenceEngine,
        contracts: Optional[Mapping[AnalysisKind, InferenceContract]] = None,
        timeout: float = 30.0,
    ) -> None:
        self.engine = engine
        self.contracts = dict(contracts or CONTRACTS)
        self.timeout = timeout

        self._invocations: int = 0
        self._failures: int = 0
        self._clamped: int = 0

    def contract_for(self, kind: AnalysisKind) -> InferenceContract:
        try:
            return self.contracts[AnalysisKind(kind)]
        except (KeyError, ValueError) as e:
            raise ValidationError(f"Unknown analysis kind: {kind}") from e

    async def invoke(
        self,
        kind: AnalysisKind,
        frame: ImageFrame,
        options: Optional[Mapping[str, Any]] = None,
    ) -> AnalysisResult:
        """
        Run one analysis of a frame.

        Args:
            kind: Analysis kind
            frame: Captured still frame
            options: Kind-specific preferences

        Returns:
            Detected or Undetected

        Raises:
            ValidationError: Request or response violated the contract
            EngineError: Engine call failed or timed out
        """
        self._invocations += 1
        try:
            contract = self.contract_for(kind)
            request = self._build_request(contract, frame, options)
            raw = await self._call_engine(request)
            result = self._enforce(contract, raw)
        except WellcamError as e:
            self._failures += 1
            logger.warning(f"Invocation failed (kind={kind}): {e.kind.value}: {e.message}")
            raise

        logger.info(f"Invocation complete: kind={contract.kind.value}, status={result.status}")
        return result

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _build_request(
        self,
        contract: InferenceContract,
        frame: ImageFrame,
        options: Optional[Mapping[str, Any]],
    ) -> EngineRequest:
        """Step 1: validate input and options."""
        if not isinstance(frame, ImageFrame):
            raise ValidationError(f"Expected ImageFrame, got {type(frame).__name__}")

        try:
            contract.input_model.model_validate({"photo_data_uri": frame.data_uri})
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid input frame: {describe_validation_error(e)}") from e

        validated_options: Dict[str, Any] = {}
        if options:
            if contract.options_model is None:
                raise ValidationError(
                    f"{contract.kind.value} does not accept options: {sorted(options)}"
                )
            try:
                parsed = contract.options_model.model_validate(dict(options))
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid options: {describe_validation_error(e)}") from e
            validated_options = parsed.model_dump(mode="json", exclude_none=True)

        return EngineRequest(
            kind=contract.kind.value,
            prompt=contract.prompt,
            response_model=contract.response_model,
            image_data_uri=frame.data_uri,
            options=validated_options,
        )

    async def _call_engine(self, request: EngineRequest) -> Mapping[str, Any]:
        """Step 2: remote call with timeout."""
        try:
            raw = await asyncio.wait_for(self.engine.generate(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise EngineError(f"Inference timed out after {self.timeout:.1f}s")
        except EngineError:
            raise
        except Exception as e:
            raise EngineError(f"Inference call failed: {e}") from e

        if not isinstance(raw, Mapping):
            raise ValidationError(f"Engine returned {type(raw).__name__}, expected an object")
        return raw

    def _enforce(self, contract: InferenceContract, raw: Mapping[str, Any]) -> AnalysisResult:
        """Steps 3-5: validate, bound, fix and gate."""
        try:
            response = contract.response_model.model_validate(dict(raw))
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Engine response violates {contract.kind.value} schema: "
                f"{describe_validation_error(e)}"
            ) from e

        values = response.model_dump()

        for field_name, canonical in contract.fixed_fields.items():
            if values.get(field_name) != canonical:
                logger.debug(f"Overwriting fixed field '{field_name}' ({contract.kind.value})")
            values[field_name] = canonical

        if not values[contract.relevance_field]:
            return Undetected(
                kind=contract.kind,
                reason=self._reason(contract, values),
                fixed=dict(contract.fixed_fields),
            )

        self._apply_bounds(contract, values)

        payload_data = {
            payload_field: values[response_field]
            for payload_field, response_field in contract.payload_fields.items()
        }
        try:
            payload = contract.payload_model.model_validate(payload_data)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Relevant {contract.kind.value} response has invalid content: "
                f"{describe_validation_error(e)}"
            ) from e
        return Detected(payload=payload)

    def _apply_bounds(self, contract: InferenceContract, values: Dict[str, Any]) -> None:
        for bound in contract.bounds:
            value = values.get(bound.field)
            if value is None or bound.contains(value):
                continue
            if bound.policy == ScorePolicy.CLAMP:
                clamped = bound.clamp(value)
                self._clamped += 1
                logger.info(
                    f"Clamped {contract.kind.value}.{bound.field}: {value} → {clamped}"
                )
                values[bound.field] = clamped
            else:
                raise ValidationError(
                    f"{contract.kind.value}.{bound.field}={value} outside "
                    f"[{bound.minimum:g}, {bound.maximum:g}]"
                )

    @staticmethod
    def _reason(contract: InferenceContract, values: Mapping[str, Any]) -> str:
        for field_name in contract.reason_fields:
            reason = values.get(field_name)
            if isinstance(reason, str) and reason.strip():
                return reason.strip()
        return contract.fallback_reason

    def get_metrics(self) -> dict:
        """Get invoker metrics for observability."""
        return {
            "invocations": self._invocations,
            "failures": self._failures,
            "clamped_values": self._clamped,
        }
