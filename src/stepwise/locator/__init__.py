"""
Element location: candidate snapshots, scoring and query synthesis.

Provides:
- ElementCandidate / ScoredElement / TargetKind: candidate model
- DomScanner: one-call snapshot of visible candidates
- CandidateScorer / SCORING_STAGES: tiered, named scoring rules
- LocatorQuery: driver-neutral selector chain
- LocatorFactory: candidate → resilient query, with kind refinement
- SmartLocator: broad-search scan → score → build
"""

from stepwise.locator.candidate import (
    DESCRIBE_ELEMENT_JS,
    ElementCandidate,
    ScoredElement,
    TargetKind,
)
from stepwise.locator.query import LocatorQuery
from stepwise.locator.scanner import DomScanner
from stepwise.locator.scoring import SCORING_STAGES, ScoringRule, ScoringStage, clean_target_name
from stepwise.locator.scorer import CandidateScorer
from stepwise.locator.factory import LocatorFactory, looks_dynamic_id
from stepwise.locator.smart_locator import ACTION_KINDS, SmartLocator, kind_for

__all__ = [
    # Candidates
    "DESCRIBE_ELEMENT_JS",
    "ElementCandidate",
    "ScoredElement",
    "TargetKind",
    # Scanning and scoring
    "DomScanner",
    "CandidateScorer",
    "SCORING_STAGES",
    "ScoringRule",
    "ScoringStage",
    "clean_target_name",
    # Query synthesis
    "LocatorQuery",
    "LocatorFactory",
    "looks_dynamic_id",
    # Broad search
    "ACTION_KINDS",
    "SmartLocator",
    "kind_for",
]
