"""User-facing phrasing built from engine output. Never consulted by the solver."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from app.api.schemas.timing import ScheduledItem, Severity
from app.services.timing.confidence import get_confidence_band

DISCLAIMER_SHORT = (
    "For informational purposes only, not medical advice. Always confirm with your healthcare provider."
)
HEADER_SUGGESTION = "Based on general timing guidelines, here is a suggested schedule for your items:"
STRONG_LANGUAGE_MIN_CONFIDENCE = 85


@dataclass(frozen=True)
class ConfidencePhrasing:
    label: str
    sentence_starter: str


_PHRASING = {
    "high": ConfidencePhrasing("Well-supported", "This timing is generally well-supported."),
    "moderate": ConfidencePhrasing("Commonly recommended", "Many people follow this timing approach."),
    "low": ConfidencePhrasing("Informational", "Limited general guidance is available for this timing."),
}


def confidence_phrasing(confidence: int) -> ConfidencePhrasing:
    return _PHRASING[get_confidence_band(confidence)]


def severity_verb(severity: Severity, confidence: int) -> str:
    """Stronger wording only for hard rules backed by high confidence."""
    if severity == "hard" and confidence >= STRONG_LANGUAGE_MIN_CONFIDENCE:
        return "should"
    return "may benefit from"


def item_explanation(item: ScheduledItem, reasons: List[str] | None = None) -> str:
    parts = [f"{item.display_name} is scheduled at {item.scheduled_time}."]
    parts.extend(reasons or [])
    if item.with_food:
        parts.append("This item is commonly taken with food.")
    if item.constraints_violated:
        parts.append(
            "We were unable to satisfy all timing preferences; consider discussing this with your pharmacist."
        )
    return " ".join(parts)
