"""
Evidence verdict policy.

Rules applied in code after the evaluator's inference call, in order:
official override, deadline guard for NO, absence-of-evidence guard for
NO, single-source cap, no-official-confirmation cap. Caps count distinct
sources, so an assessment repeated by the evaluator is counted once.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.schemas import (
    EvidenceCorpus,
    Market,
    Outcome,
    SourceAssessment,
    SourceType,
    Verdict,
)

from .sources import classify_source_type

FLAG_OFFICIAL_OVERRIDE = "OFFICIAL_SOURCE_OVERRIDE"
FLAG_SINGLE_SOURCE_CAP = "SINGLE_SOURCE_CAP"
FLAG_NO_OFFICIAL_CONFIRMATION = "NO_OFFICIAL_CONFIRMATION"
FLAG_DEADLINE_NOT_PASSED = "DEADLINE_NOT_PASSED"
FLAG_ABSENCE_OF_EVIDENCE = "ABSENCE_OF_EVIDENCE"
FLAG_NO_EVIDENCE = "NO_EVIDENCE"

SINGLE_SOURCE_CAP = 0.79
NO_OFFICIAL_CONFIRMATION_CAP = 0.84
MIN_INDEPENDENT_MAINSTREAM = 2

_DECISIVE = (Outcome.YES, Outcome.NO)


def source_type_of(assessment: SourceAssessment, corpus: EvidenceCorpus) -> SourceType:
    """Type of an assessed source, looked up in the corpus by URL, then title."""
    for source in corpus.sources:
        if assessment.url and source.url == assessment.url:
            return source.source_type
    title = assessment.source_title.strip().lower()
    if title:
        for source in corpus.sources:
            if source.title.strip().lower() == title:
                return source.source_type
    return classify_source_type(assessment.url or assessment.source_title)


def _source_key(assessment: SourceAssessment) -> str:
    if assessment.url:
        return assessment.url.strip()
    return assessment.source_title.strip().lower()


def _backing(verdict: Verdict, outcome: Outcome, corpus: EvidenceCorpus) -> list[tuple[SourceAssessment, SourceType]]:
    """Distinct sources supporting `outcome`, first assessment per URL (or title) wins."""
    backing = []
    seen: set[str] = set()
    for a in verdict.source_analysis:
        if a.supports != outcome.value:
            continue
        key = _source_key(a)
        if key in seen:
            continue
        if key:
            seen.add(key)
        backing.append((a, source_type_of(a, corpus)))
    return backing


def _official_side(verdict: Verdict, corpus: EvidenceCorpus) -> Optional[Outcome]:
    sides = {
        a.supports
        for a in verdict.source_analysis
        if a.supports in ("YES", "NO") and source_type_of(a, corpus) == SourceType.OFFICIAL
    }
    if len(sides) == 1:
        return Outcome(sides.pop())
    return None


def _undetermined(verdict: Verdict, flag: str, note: str) -> Verdict:
    return verdict.model_copy(
        update={
            "outcome": Outcome.UNDETERMINED,
            "confidence": 0.0,
            "reasoning": f"{verdict.reasoning} {note}".strip(),
            "flags": verdict.flags + [flag],
        }
    )


def apply_evidence_policy(verdict: Verdict, corpus: EvidenceCorpus, market: Market, now: datetime) -> Verdict:
    """Return a policy-compliant copy of the evaluator's verdict."""
    if verdict.outcome == Outcome.UNDETERMINED:
        return verdict.model_copy(update={"confidence": 0.0})

    official = _official_side(verdict, corpus)
    if official is not None and official != verdict.outcome:
        verdict = verdict.model_copy(
            update={
                "outcome": official,
                "reasoning": f"{verdict.reasoning} Official sources state {official.value}, overriding news reports.".strip(),
                "supporting_sources": verdict.contradicting_sources,
                "contradicting_sources": verdict.supporting_sources,
                "flags": verdict.flags + [FLAG_OFFICIAL_OVERRIDE],
            }
        )

    if verdict.outcome == Outcome.NO and not market.deadline_passed(now):
        return _undetermined(
            verdict,
            FLAG_DEADLINE_NOT_PASSED,
            "The deadline has not passed, so the event may still occur.",
        )

    backing = _backing(verdict, verdict.outcome, corpus)
    if verdict.outcome == Outcome.NO and not backing:
        return _undetermined(
            verdict,
            FLAG_ABSENCE_OF_EVIDENCE,
            "No source affirmatively supports NO; absence of evidence is not evidence of absence.",
        )

    confidence = verdict.confidence
    flags = list(verdict.flags)
    types = [t for _, t in backing]
    has_official = SourceType.OFFICIAL in types
    has_wire = SourceType.WIRE_SERVICE in types
    mainstream = sum(1 for t in types if t == SourceType.MAINSTREAM_NEWS)

    if len(backing) <= 1 and not has_official and confidence > SINGLE_SOURCE_CAP:
        confidence = SINGLE_SOURCE_CAP
        flags.append(FLAG_SINGLE_SOURCE_CAP)
    if not (has_official or has_wire) and mainstream < MIN_INDEPENDENT_MAINSTREAM and confidence > NO_OFFICIAL_CONFIRMATION_CAP:
        confidence = NO_OFFICIAL_CONFIRMATION_CAP
        flags.append(FLAG_NO_OFFICIAL_CONFIRMATION)

    return verdict.model_copy(update={"confidence": confidence, "flags": flags})
