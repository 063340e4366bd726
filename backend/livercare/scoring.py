# backend/livercare/scoring.py
"""Weighted-rule cirrhosis risk score.

Each rule is an explicit (predicate, score delta, confidence delta) entry and
rules are evaluated in table order. The raw score is the plain sum of the
triggered score deltas; it is normalized onto 0-100 by dividing by
``RAW_SCORE_DIVISOR`` and clamped to 100.

Every rule triggered together sums to exactly 15, the divisor, so the clamp
only matters for custom rule tables.
"""
import math
from typing import Callable, List, NamedTuple, Optional, Tuple

from .models import PatientRecord, RiskLevel, require_mandatory

BASE_CONFIDENCE = 90
MAX_CONFIDENCE = 98
RAW_SCORE_DIVISOR = 15

HIGH_THRESHOLD = 75
MEDIUM_THRESHOLD = 50


class Rule(NamedTuple):
    name: str
    label: str
    predicate: Callable[[PatientRecord], bool]
    score_delta: float
    confidence_delta: int = 0


def _above(value: Optional[float], limit: float) -> bool:
    # Absent optional labs never contribute
    return value is not None and value > limit


RULES: Tuple[Rule, ...] = (
    Rule("bilirubin", "Bilirubin > 2.0 mg/dL", lambda r: r.bilirubin > 2.0, 2),
    Rule("albumin", "Albumin < 3.5 g/dL", lambda r: r.albumin < 3.5, 2),
    Rule("platelets", "Platelets < 150 x10^3/uL", lambda r: r.platelets < 150, 1.5),
    Rule("alkaline_phosphatase", "Alkaline phosphatase > 200",
         lambda r: _above(r.alkaline_phosphatase, 200), 1, 2),
    Rule("sgot", "SGOT > 40", lambda r: _above(r.sgot, 40), 1, 2),
    Rule("prothrombin", "Prothrombin time > 12 s", lambda r: _above(r.prothrombin, 12), 1.5, 2),
    Rule("history_of_alcohol", "History of alcohol use", lambda r: r.history_of_alcohol, 2),
    Rule("hepatitis", "Hepatitis", lambda r: r.hepatitis, 1.5),
    Rule("diabetes", "Diabetes", lambda r: r.diabetes, 1),
    Rule("age_over_60", "Age > 60", lambda r: r.age > 60, 1),
    Rule("age_over_70", "Age > 70", lambda r: r.age > 70, 0.5),
)

# Lower bound of each band, highest first
RISK_BANDS: Tuple[Tuple[RiskLevel, int, int], ...] = (
    (RiskLevel.high, HIGH_THRESHOLD, 100),
    (RiskLevel.medium, MEDIUM_THRESHOLD, HIGH_THRESHOLD - 1),
    (RiskLevel.low, 0, MEDIUM_THRESHOLD - 1),
)


class RuleHit(NamedTuple):
    name: str
    label: str
    score_delta: float
    confidence_delta: int


def explain(record: PatientRecord, rules: Tuple[Rule, ...] = RULES) -> List[RuleHit]:
    """Triggered rules for ``record``, in table order."""
    require_mandatory(record)
    return [
        RuleHit(rule.name, rule.label, rule.score_delta, rule.confidence_delta)
        for rule in rules
        if rule.predicate(record)
    ]


def score(record: PatientRecord, rules: Tuple[Rule, ...] = RULES) -> Tuple[float, int]:
    """Return ``(raw_score, confidence)`` for a validated record."""
    hits = explain(record, rules)
    raw = float(sum(h.score_delta for h in hits))
    confidence = min(BASE_CONFIDENCE + sum(h.confidence_delta for h in hits), MAX_CONFIDENCE)
    return raw, confidence


def normalize(raw_score: float) -> int:
    scaled = min(raw_score / RAW_SCORE_DIVISOR * 100, 100)
    # round half up
    return max(0, min(100, int(math.floor(scaled + 0.5))))


def classify(risk_score: int) -> RiskLevel:
    if risk_score >= HIGH_THRESHOLD:
        return RiskLevel.high
    if risk_score >= MEDIUM_THRESHOLD:
        return RiskLevel.medium
    return RiskLevel.low
