"""
Intent pipeline: lexicon-driven step analysis and semantic resolution.

Provides:
- StepIntent / IntentCategory: decomposed reading of a step
- IntentAnalyzer: category, target, value and modifier extraction
- CapabilityRule / CAPABILITY_RULES: which phrasings the pipeline delegates
- IntelligentStepProcessor: eligibility gate, matcher dispatch, intent → plan
- StepSuggestionEngine: supported rewrites for unsupported steps
"""

from stepwise.intelligence.intent import IntentCategory, StepIntent
from stepwise.intelligence.intent_analyzer import IntentAnalyzer
from stepwise.intelligence.capabilities import (
    CAPABILITY_RULES,
    CapabilityRule,
    delegating_rule,
    ineligibility_reason,
    is_composite,
)
from stepwise.intelligence.processor import IntelligentStepProcessor
from stepwise.intelligence.suggestions import StepSuggestion, StepSuggestionEngine

__all__ = [
    # Intent model
    "IntentCategory",
    "StepIntent",
    # Analysis
    "IntentAnalyzer",
    # Eligibility
    "CapabilityRule",
    "CAPABILITY_RULES",
    "delegating_rule",
    "ineligibility_reason",
    "is_composite",
    # Orchestration
    "IntelligentStepProcessor",
    # Suggestions
    "StepSuggestion",
    "StepSuggestionEngine",
]
