"""
Pipeline orchestration.

Public API:
- Pipeline: runs markets through classification and the matching track
- create_pipeline / create_test_pipeline: constructors
- determine_settlement: category + confidence -> SettlementAction
- route / DataTrack / EventTrack / RejectedTrack: track dispatch
"""

from orchestrator.pipeline import Pipeline, create_pipeline, create_test_pipeline
from orchestrator.settlement import DEFER_THRESHOLD, SETTLE_THRESHOLD, determine_settlement
from orchestrator.tracks import DataTrack, EventTrack, RejectedTrack, Track, route

__all__ = [
    "Pipeline",
    "create_pipeline",
    "create_test_pipeline",
    "determine_settlement",
    "SETTLE_THRESHOLD",
    "DEFER_THRESHOLD",
    "route",
    "Track",
    "DataTrack",
    "EventTrack",
    "RejectedTrack",
]
