"""LiverCare risk assessment engine.

Scores liver-cirrhosis risk from a fixed set of clinical inputs and keeps an
append-only history of every assessment.
"""
from .engine import AssessmentEngine, AssessmentSession
from .errors import NotFoundError, ValidationError
from .history import HistoryLedger
from .models import AssessmentResult, Gender, HistoryEntry, PatientRecord, RiskLevel

__all__ = [
    "AssessmentEngine",
    "AssessmentResult",
    "AssessmentSession",
    "Gender",
    "HistoryEntry",
    "HistoryLedger",
    "NotFoundError",
    "PatientRecord",
    "RiskLevel",
    "ValidationError",
]
__version__ = "0.1.0"
