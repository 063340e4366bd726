# backend/livercare/report.py
"""Export-ready views of the current assessment and the history.

Rendering to PDF belongs to the export client; this module only produces the
data it prints, plus a plain-text rendition and a CSV of the history.
"""
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from pydantic import BaseModel

from .history import HistoryLedger
from .models import AssessmentResult, HistoryEntry

SUBTITLE = "Authorized Medical Assessment Tool"


class ReportAssessment(BaseModel):
    risk_score: int
    risk_level: str
    confidence: str
    recommendations: List[str]


class ReportHistoryItem(BaseModel):
    id: str
    title: str
    timestamp: str
    risk_score: int
    risk_level: str
    confidence: str


class Report(BaseModel):
    title: str
    subtitle: str = SUBTITLE
    generated_on: str
    current: Optional[ReportAssessment] = None
    history: List[ReportHistoryItem] = []


def _format_date(ts: datetime) -> str:
    return f"{ts:%B} {ts.day}, {ts:%Y %I:%M %p}"


def build_report(
    current: Optional[AssessmentResult],
    entries: Sequence[HistoryEntry],
    app_name: str = "LiverCare AI",
    generated_on: Optional[datetime] = None,
) -> Report:
    """``entries`` are expected most-recent-first, as HistoryLedger.list() returns them."""
    generated_on = generated_on or datetime.now(timezone.utc)

    cur = None
    if current is not None:
        cur = ReportAssessment(
            risk_score=current.risk_score,
            risk_level=current.risk_level.value,
            confidence=f"{current.confidence}%",
            recommendations=list(current.recommendations),
        )

    items = [
        ReportHistoryItem(
            id=e.id,
            title=f"Assessment {i} - {_format_date(e.timestamp)}",
            timestamp=e.timestamp.isoformat(),
            risk_score=e.prediction_result.risk_score,
            risk_level=e.prediction_result.risk_level.value,
            confidence=f"{e.prediction_result.confidence}%",
        )
        for i, e in enumerate(entries, start=1)
    ]

    return Report(
        title=f"{app_name} - Patient Report",
        generated_on=generated_on.isoformat(),
        current=cur,
        history=items,
    )


def render_text(report: Report) -> str:
    lines = [report.title, report.subtitle, f"Generated on: {report.generated_on}", ""]
    if report.current is not None:
        c = report.current
        lines += [
            "Current Assessment",
            f"Risk Score: {c.risk_score}",
            f"Risk Level: {c.risk_level}",
            f"Confidence: {c.confidence}",
            "Recommendations:",
        ]
        lines += [f"  - {rec}" for rec in c.recommendations]
        lines.append("")
    if report.history:
        lines.append("Assessment History")
        for item in report.history:
            lines += [
                item.title,
                f"  Risk Score: {item.risk_score}",
                f"  Risk Level: {item.risk_level}",
                f"  Confidence: {item.confidence}",
            ]
    return "\n".join(lines).rstrip() + "\n"


def history_csv(ledger: HistoryLedger) -> str:
    return ledger.to_frame().to_csv(index=False)
