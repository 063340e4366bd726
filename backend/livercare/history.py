# backend/livercare/history.py
import logging
import threading
from typing import Any, Dict, List, Optional

import pandas as pd

from .errors import NotFoundError
from .models import HistoryEntry, RiskLevel

log = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "id", "timestamp", "risk_score", "risk_level", "confidence",
    "bilirubin", "albumin", "platelets", "copper",
    "alkaline_phosphatase", "sgot", "prothrombin",
]


class HistoryLedger:
    """Append-only record of past assessments.

    Entries are kept in insertion order and never mutated or removed.
    ``list()`` surfaces them most-recent-first. A lock serializes appends and
    reads so concurrent callers never observe a partial append.
    """

    def __init__(self):
        self._entries: List[HistoryEntry] = []
        self._by_id: Dict[str, HistoryEntry] = {}
        self._lock = threading.Lock()

    def append(self, entry: HistoryEntry) -> None:
        with self._lock:
            if entry.id in self._by_id:
                raise ValueError(f"Duplicate history id {entry.id!r}")
            self._entries.append(entry)
            self._by_id[entry.id] = entry
        log.debug("history append id=%s size=%d", entry.id, len(self._entries))

    def list(self) -> List[HistoryEntry]:
        with self._lock:
            return list(reversed(self._entries))

    def get(self, entry_id: str) -> HistoryEntry:
        with self._lock:
            entry = self._by_id.get(entry_id)
        if entry is None:
            raise NotFoundError(entry_id)
        return entry

    def latest(self) -> Optional[HistoryEntry]:
        with self._lock:
            return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def summary(self) -> Dict[str, Any]:
        """Dashboard counts and averages over every recorded assessment."""
        entries = self.list()
        by_level = {level.value: 0 for level in RiskLevel}
        for e in entries:
            by_level[e.prediction_result.risk_level.value] += 1

        total = len(entries)
        if total:
            mean_score = round(sum(e.prediction_result.risk_score for e in entries) / total, 1)
            mean_conf = round(sum(e.prediction_result.confidence for e in entries) / total, 1)
        else:
            mean_score = mean_conf = None

        return {
            "total": total,
            "by_level": by_level,
            "mean_risk_score": mean_score,
            "mean_confidence": mean_conf,
            "latest_timestamp": entries[0].timestamp.isoformat() if entries else None,
        }

    def to_frame(self) -> pd.DataFrame:
        """One row per entry, most-recent-first, absent labs rendered as 0."""
        rows = []
        for e in self.list():
            res = e.prediction_result
            row = {
                "id": e.id,
                "timestamp": e.timestamp.isoformat(),
                "risk_score": res.risk_score,
                "risk_level": res.risk_level.value,
                "confidence": res.confidence,
            }
            row.update(res.features.materialized())
            rows.append(row)
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)
