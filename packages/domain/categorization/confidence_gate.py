"""
Confidence Gate - decides whether the top embedding match is trusted as-is

Tiers (top match similarity):
- HIGH     >= 0.8 : accept the embedding match
- MEDIUM   >= 0.6 : validate with LLM
- LOW      >= 0.4 : validate with LLM
- VERY_LOW <  0.4 : validate with LLM and flag the report for human review
"""
from dataclasses import dataclass
from enum import Enum


class ConfidenceThreshold(float, Enum):
    HIGH = 0.8
    MEDIUM = 0.6
    LOW = 0.4
    VERY_LOW = 0.0


class GateDecision(str, Enum):
    ACCEPT = "accept"
    ESCALATE = "escalate"


@dataclass(frozen=True)
class GateResult:
    decision: GateDecision
    level: str
    requires_review: bool


def describe(similarity: float) -> str:
    """Human-readable confidence level for a similarity score"""
    if similarity >= ConfidenceThreshold.HIGH:
        return "High"
    if similarity >= ConfidenceThreshold.MEDIUM:
        return "Medium"
    if similarity >= ConfidenceThreshold.LOW:
        return "Low"
    return "Very Low"


def evaluate(similarity: float) -> GateResult:
    """Apply the gate to the top match's similarity"""
    if similarity >= ConfidenceThreshold.HIGH:
        return GateResult(GateDecision.ACCEPT, describe(similarity), requires_review=False)

    return GateResult(
        GateDecision.ESCALATE,
        describe(similarity),
        requires_review=similarity < ConfidenceThreshold.LOW,
    )
