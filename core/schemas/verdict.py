"""
Core Schemas
File: verdict.py

Purpose: Verdicts and the terminal resolution record.
A Verdict comes from either the resolution agent or the evidence
evaluator; a ResolutionResult is created exactly once per market and
is the only shape the on-chain reporting layer consumes.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .deterministic import DeterministicSpec
from .evidence import EvidenceSource, SourceAssessment
from .market import MarketCategory


class Outcome(str, Enum):
    YES = "YES"
    NO = "NO"
    UNDETERMINED = "UNDETERMINED"


class SettlementAction(str, Enum):
    """Downstream instruction for a market's financial positions."""

    SETTLE = "SETTLE"
    DEFER = "DEFER"
    ESCALATE = "ESCALATE"
    REJECT = "REJECT"


class DataSummary(BaseModel):
    """How fetched data was mapped onto the market's comparator."""

    model_config = ConfigDict(extra="ignore")

    fetched_value: Optional[str] = None
    threshold: Optional[str] = None
    comparator: Optional[str] = None
    comparison_result: Optional[str] = None


class Verdict(BaseModel):
    """YES/NO/UNDETERMINED outcome with confidence and reasoning."""

    model_config = ConfigDict(extra="forbid")

    outcome: Outcome
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = ""
    summary: str = ""
    data_summary: Optional[DataSummary] = None
    source_analysis: list[SourceAssessment] = Field(default_factory=list)
    supporting_sources: list[str] = Field(default_factory=list)
    contradicting_sources: list[str] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list)
    temporal_notes: Optional[str] = None

    @classmethod
    def undetermined(
        cls,
        reasoning: str,
        *,
        flags: Optional[list[str]] = None,
        data_summary: Optional[DataSummary] = None,
    ) -> "Verdict":
        """Verdict used whenever data cannot decide the market."""
        return cls(
            outcome=Outcome.UNDETERMINED,
            confidence=0.0,
            reasoning=reasoning,
            data_summary=data_summary,
            flags=list(flags or []),
        )


class EvidenceTrail(BaseModel):
    """Sources behind a result, as reported downstream."""

    model_config = ConfigDict(extra="forbid")

    sources_consulted: int = 0
    sources: list[EvidenceSource] = Field(default_factory=list)
    summary: str = ""


class ResolutionResult(BaseModel):
    """Terminal record produced once per pipeline invocation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    market_id: str
    category: MarketCategory
    outcome: Outcome
    confidence: float = Field(..., ge=0.0, le=1.0)
    settlement_action: SettlementAction
    reasoning: str
    evidence_trail: EvidenceTrail = Field(default_factory=EvidenceTrail)
    deterministic_spec: Optional[DeterministicSpec] = None
    flags: list[str] = Field(default_factory=list)
    resolved_at: datetime

    @field_validator("reasoning")
    @classmethod
    def validate_reasoning_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("reasoning must not be empty")
        return v

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict for the reporting collaborator."""
        return self.model_dump(mode="json")
