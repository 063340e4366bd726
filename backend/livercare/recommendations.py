# backend/livercare/recommendations.py
from typing import Callable, List, Tuple

from .models import PatientRecord, RiskLevel

BASELINE = {
    RiskLevel.high: (
        "Immediate medical consultation recommended",
        "Regular liver function monitoring required",
        "Consider liver biopsy and advanced imaging (MRI/CT)",
        "Screen for hepatocellular carcinoma every 6 months",
        "Implement strict alcohol cessation program",
    ),
    RiskLevel.medium: (
        "Schedule follow-up appointment within 3 months",
        "Consider lifestyle modifications",
        "Repeat liver function tests in 3 months",
        "Consider hepatology consultation",
        "Monitor for symptom development",
    ),
    RiskLevel.low: (
        "Continue regular health maintenance",
        "Annual liver function assessment recommended",
        "Maintain healthy lifestyle habits",
        "Monitor for any symptom changes",
        "Follow up in 12 months",
    ),
}

# Appended after the baseline block, in this order
CONDITIONAL: Tuple[Tuple[Callable[[PatientRecord], bool], str], ...] = (
    (lambda r: r.bilirubin > 2.0, "High bilirubin levels detected - further testing recommended"),
    (lambda r: r.albumin < 3.5, "Low albumin levels - dietary consultation recommended"),
    (lambda r: r.platelets < 150, "Low platelet count - regular monitoring required"),
    (lambda r: r.history_of_alcohol, "Consider alcohol cessation program"),
    (lambda r: r.hepatitis, "Follow up with hepatologist for hepatitis management"),
    (lambda r: r.diabetes, "Ensure proper diabetes management and monitoring"),
)


def recommend(risk_level: RiskLevel, record: PatientRecord) -> List[str]:
    recommendations = list(BASELINE[RiskLevel(risk_level)])
    for applies, text in CONDITIONAL:
        if applies(record):
            recommendations.append(text)
    return recommendations
