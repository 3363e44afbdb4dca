"""Overall confidence scoring and confidence bands."""
from __future__ import annotations

from typing import List, Literal

from app.services.timing.clock import clamp
from app.services.timing.profile_matcher import MatchedItem
from app.services.timing.resolver import ResolveResult

ConfidenceBand = Literal["high", "moderate", "low"]

PROFILE_COVERAGE_WEIGHT = 70
RULE_SATISFACTION_WEIGHT = 30


def compute_confidence(matched: List[MatchedItem], resolved: ResolveResult) -> int:
    """
    Blend profile coverage and separation-constraint satisfaction into a 0-100 score.

    An empty request scores 100: neither ratio has anything to measure.
    """
    if not matched:
        return 100
    coverage = sum(1 for item in matched if item.matched) / len(matched)
    if resolved.binary_total:
        satisfaction = resolved.binary_satisfied / resolved.binary_total
    else:
        satisfaction = 1.0
    raw = coverage * PROFILE_COVERAGE_WEIGHT + satisfaction * RULE_SATISFACTION_WEIGHT
    return int(clamp(round(raw), 0, 100))


def get_confidence_band(confidence: int) -> ConfidenceBand:
    if confidence >= 80:
        return "high"
    if confidence >= 60:
        return "moderate"
    return "low"
