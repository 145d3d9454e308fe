"""
Core Schemas

Public API for the resolution data model.
This is the main entry point for other modules to import schema definitions.
"""

# Error models and exceptions
from .errors import (
    ErrorCodes,
    FetchFailed,
    InferenceUnavailable,
    OracleError,
    OracleException,
    ParseRejected,
    PipelineError,
    ProviderUnavailable,
)

# Market intake
from .market import (
    Classification,
    Market,
    MarketCategory,
    parse_timestamp,
)

# Deterministic track
from .deterministic import (
    REQUIRED_FIELDS,
    DeterministicSpec,
    FetchResult,
    ParseRejection,
    ParserResult,
    StrategyType,
)

# Evidence track
from .evidence import (
    SOURCE_TYPE_TRUST,
    EvidenceCorpus,
    EvidencePlan,
    EvidenceSource,
    SourceAssessment,
    SourceType,
    TimeWindow,
    dedupe_sources,
)

# Verdicts and results
from .verdict import (
    DataSummary,
    EvidenceTrail,
    Outcome,
    ResolutionResult,
    SettlementAction,
    Verdict,
)

__all__ = [
    # Errors
    "ErrorCodes",
    "FetchFailed",
    "InferenceUnavailable",
    "OracleError",
    "OracleException",
    "ParseRejected",
    "PipelineError",
    "ProviderUnavailable",
    # Market
    "Classification",
    "Market",
    "MarketCategory",
    "parse_timestamp",
    # Deterministic
    "REQUIRED_FIELDS",
    "DeterministicSpec",
    "FetchResult",
    "ParseRejection",
    "ParserResult",
    "StrategyType",
    # Evidence
    "SOURCE_TYPE_TRUST",
    "EvidenceCorpus",
    "EvidencePlan",
    "EvidenceSource",
    "SourceAssessment",
    "SourceType",
    "TimeWindow",
    "dedupe_sources",
    # Verdict
    "DataSummary",
    "EvidenceTrail",
    "Outcome",
    "ResolutionResult",
    "SettlementAction",
    "Verdict",
]
