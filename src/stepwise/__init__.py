"""
stepwise - Deterministic step-to-action resolution.

Translates free-form test step sentences ("When I click the Submit
button") into structured ActionPlans and resilient element queries,
using ordered pattern rules, a lexicon-driven intent analyzer and
weighted DOM-candidate scoring.
"""

__version__ = "1.0.0"
__author__ = "Olib AI"

from stepwise.config import Settings, get_settings, load_settings
from stepwise.errors import (
    CandidateInspectionError,
    ConfigurationError,
    StepFileError,
    StepwiseError,
    WindowTimeoutError,
)
from stepwise.intelligence import IntentAnalyzer, IntentCategory, IntelligentStepProcessor, StepIntent
from stepwise.locator import CandidateScorer, ElementCandidate, LocatorFactory, LocatorQuery, SmartLocator
from stepwise.planner import ActionPlan, CompositeActionPlan, StepParser, StepPlanner
from stepwise.resolver import ResolvedStep, StepResolver
from stepwise.session import StepSession, WindowTracker

__all__ = [
    "__version__",
    "ActionPlan",
    "CompositeActionPlan",
    "StepPlanner",
    "StepParser",
    "StepIntent",
    "IntentCategory",
    "IntentAnalyzer",
    "IntelligentStepProcessor",
    "ElementCandidate",
    "CandidateScorer",
    "LocatorQuery",
    "LocatorFactory",
    "SmartLocator",
    "StepResolver",
    "ResolvedStep",
    "StepSession",
    "WindowTracker",
    "Settings",
    "get_settings",
    "load_settings",
    "StepwiseError",
    "ConfigurationError",
    "CandidateInspectionError",
    "WindowTimeoutError",
    "StepFileError",
]
