# backend/livercare/engine.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from .errors import ValidationError
from .history import HistoryLedger
from .models import AssessmentResult, FeatureSnapshot, HistoryEntry, validate_record
from .recommendations import recommend
from .scoring import RuleHit, classify, explain, normalize, score

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class AssessmentEngine:
    """Single entry point of the risk core.

    ``assess`` validates, scores, classifies, recommends, stamps the result
    and appends exactly one history entry. Any failure happens before the
    append, so a failed assessment leaves the ledger untouched.
    """

    def __init__(
        self,
        ledger: Optional[HistoryLedger] = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.history = ledger if ledger is not None else HistoryLedger()
        self._clock = clock
        self._id_factory = id_factory

    def evaluate(self, record: Any) -> AssessmentResult:
        """Build an AssessmentResult without recording it."""
        record = validate_record(record)
        raw, confidence = score(record)
        risk_score = normalize(raw)
        level = classify(risk_score)
        return AssessmentResult(
            risk_score=risk_score,
            risk_level=level,
            confidence=confidence,
            recommendations=tuple(recommend(level, record)),
            features=FeatureSnapshot.from_record(record),
            timestamp=self._clock(),
        )

    def assess(self, record: Any) -> AssessmentResult:
        try:
            record = validate_record(record)
        except ValidationError as e:
            log.warning("assessment rejected: %s", e)
            raise
        result = self.evaluate(record)
        entry = HistoryEntry(
            id=self._id_factory(),
            timestamp=result.timestamp,
            patient_data=record,
            prediction_result=result,
        )
        self.history.append(entry)
        log.info(
            "assessment id=%s score=%d level=%s confidence=%d",
            entry.id, result.risk_score, result.risk_level.value, result.confidence,
        )
        return result

    def explain(self, record: Any) -> List[RuleHit]:
        return explain(validate_record(record))


class AssessmentSession:
    """Caller-owned "current result" state on top of a shared engine."""

    def __init__(self, engine: AssessmentEngine):
        self.engine = engine
        self.last_result: Optional[AssessmentResult] = None

    def assess(self, record: Any) -> AssessmentResult:
        self.last_result = self.engine.assess(record)
        return self.last_result

    def clear(self) -> None:
        self.last_result = None
