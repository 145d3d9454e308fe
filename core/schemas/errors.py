"""
Core Schemas
File: errors.py

Purpose: Error taxonomy for the resolution pipeline.
Defines a Pydantic model for structured error payloads and the
Python exceptions used for control flow between pipeline steps.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the pipeline."""

    # Inference collaborator
    INFERENCE_UNAVAILABLE = "INFERENCE_UNAVAILABLE"

    # Deterministic track
    PARSE_REJECTED = "PARSE_REJECTED"
    MISCLASSIFIED_NOT_DETERMINISTIC = "MISCLASSIFIED_NOT_DETERMINISTIC"
    MISSING_REQUIRED_FIELDS = "MISSING_REQUIRED_FIELDS"
    UNKNOWN_STRATEGY = "UNKNOWN_STRATEGY"
    FETCH_FAILED = "FETCH_FAILED"
    UNSUPPORTED_STRATEGY = "UNSUPPORTED_STRATEGY"

    # Evidence track
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"

    # Orchestration
    PIPELINE_ERROR = "PIPELINE_ERROR"
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class OracleError(BaseModel):
    """
    Serializable error payload.

    Used by the HTTP layer and by step results that carry an error
    without raising.
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INFERENCE_UNAVAILABLE],
    )
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the caller may re-invoke the pipeline",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class OracleException(Exception):
    """
    Base exception for all resolution pipeline errors.

    Carries a code and structured details so the orchestrator can turn
    it into a terminal result without losing information.
    """

    def __init__(
        self,
        message: str,
        code: str = "ORACLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> OracleError:
        """Convert this exception to an OracleError model."""
        return OracleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InferenceUnavailable(OracleException):
    """The inference collaborator was unreachable or returned an unusable payload."""

    def __init__(
        self,
        message: str,
        step: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if step:
            full_details["step"] = step
        super().__init__(
            message=message,
            code=ErrorCodes.INFERENCE_UNAVAILABLE,
            details=full_details,
            retryable=True,
        )


class ParseRejected(OracleException):
    """A data-resolvable market could not be turned into a deterministic spec."""

    def __init__(
        self,
        message: str,
        market_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if market_id:
            full_details["market_id"] = market_id
        super().__init__(
            message=message,
            code=ErrorCodes.PARSE_REJECTED,
            details=full_details,
        )


class FetchFailed(OracleException):
    """A fetcher could not obtain usable data from its provider."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if provider:
            full_details["provider"] = provider
        super().__init__(
            message=message,
            code=ErrorCodes.FETCH_FAILED,
            details=full_details,
            retryable=True,
        )


class ProviderUnavailable(OracleException):
    """A news provider call failed; the gatherer drops its contribution."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if provider:
            full_details["provider"] = provider
        super().__init__(
            message=message,
            code=ErrorCodes.PROVIDER_UNAVAILABLE,
            details=full_details,
            retryable=True,
        )


class PipelineError(OracleException):
    """Catch-all wrapper for failures isolated to a single market."""

    def __init__(
        self,
        message: str,
        market_id: str | None = None,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if market_id:
            full_details["market_id"] = market_id
        if stage:
            full_details["stage"] = stage
        super().__init__(
            message=message,
            code=ErrorCodes.PIPELINE_ERROR,
            details=full_details,
        )
