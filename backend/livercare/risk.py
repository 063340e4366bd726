# backend/livercare/risk.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from .engine import AssessmentEngine
from .models import AssessmentResult, HistoryEntry, PatientRecord
from .report import Report, build_report, history_csv
from .scoring import RISK_BANDS

router = APIRouter(prefix="/risk", tags=["risk"])
log = logging.getLogger("uvicorn.error")


# ---------- Schemas ----------
class RuleHitOut(BaseModel):
    name: str
    label: str
    score_delta: float
    confidence_delta: int


class ExplainOut(BaseModel):
    raw_score: float
    factors: List[RuleHitOut]


class BandOut(BaseModel):
    level: str
    lower: int
    upper: int


class SummaryOut(BaseModel):
    total: int
    by_level: Dict[str, int]
    mean_risk_score: Optional[float] = None
    mean_confidence: Optional[float] = None
    latest_timestamp: Optional[str] = None


# ---------- Dependencies ----------
def get_engine(request: Request) -> AssessmentEngine:
    return request.app.state.engine


# ---------- Assessment ----------
@router.post("/assess", response_model=AssessmentResult)
def assess(payload: Dict[str, Any] = Body(...), engine: AssessmentEngine = Depends(get_engine)):
    record = PatientRecord.from_form(payload)
    result = engine.assess(record)
    log.info(f"[RISK] score={result.risk_score} level={result.risk_level.value} conf={result.confidence}")
    return result


@router.post("/explain", response_model=ExplainOut)
def explain(payload: Dict[str, Any] = Body(...), engine: AssessmentEngine = Depends(get_engine)):
    hits = engine.explain(PatientRecord.from_form(payload))
    return ExplainOut(
        raw_score=float(sum(h.score_delta for h in hits)),
        factors=[RuleHitOut(**h._asdict()) for h in hits],
    )


@router.get("/bands", response_model=List[BandOut])
def bands():
    return [BandOut(level=level.value, lower=lo, upper=hi) for level, lo, hi in RISK_BANDS]


# ---------- History ----------
@router.get("/history", response_model=List[HistoryEntry])
def list_history(engine: AssessmentEngine = Depends(get_engine)):
    return engine.history.list()


@router.get("/history/summary", response_model=SummaryOut)
def history_summary(engine: AssessmentEngine = Depends(get_engine)):
    return SummaryOut(**engine.history.summary())


@router.get("/history/export.csv", response_class=PlainTextResponse)
def export_history(engine: AssessmentEngine = Depends(get_engine)):
    return PlainTextResponse(
        history_csv(engine.history),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="assessment_history.csv"'},
    )


@router.get("/history/{entry_id}", response_model=HistoryEntry)
def get_history_entry(entry_id: str, engine: AssessmentEngine = Depends(get_engine)):
    return engine.history.get(entry_id)


@router.get("/latest", response_model=AssessmentResult)
def latest(engine: AssessmentEngine = Depends(get_engine)):
    entry = engine.history.latest()
    if entry is None:
        raise HTTPException(status_code=404, detail="No assessment recorded yet.")
    return entry.prediction_result


@router.get("/report", response_model=Report)
def report(request: Request, entry_id: Optional[str] = None, engine: AssessmentEngine = Depends(get_engine)):
    # The caller names its own assessment; the newest entry is only a fallback
    entry = engine.history.get(entry_id) if entry_id else engine.history.latest()
    current = entry.prediction_result if entry else None
    return build_report(current, engine.history.list(), app_name=request.app.state.settings.app_name)
