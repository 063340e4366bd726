"""Shared fixtures for the risk engine tests."""
import itertools
from datetime import datetime, timedelta, timezone

import pytest

from livercare.engine import AssessmentEngine
from livercare.history import HistoryLedger
from livercare.models import PatientRecord


@pytest.fixture
def scenario_a():
    """Healthy adult: no rule triggers."""
    return PatientRecord(
        age=45, gender="male", bilirubin=1.0, albumin=4.0, platelets=200,
        history_of_alcohol=False, hepatitis=False, diabetes=False,
    )


@pytest.fixture
def scenario_b():
    """Older drinker with abnormal mandatory labs: Medium risk."""
    return PatientRecord(
        age=65, gender="female", bilirubin=2.5, albumin=3.0, platelets=100,
        history_of_alcohol=True, hepatitis=False, diabetes=False,
    )


@pytest.fixture
def scenario_c():
    """Every rule triggers: High risk with all optional labs present."""
    return PatientRecord(
        age=72, gender="male", bilirubin=3.0, albumin=2.5, platelets=90,
        alkaline_phosphatase=250, sgot=50, prothrombin=15,
        history_of_alcohol=True, hepatitis=True, diabetes=True,
    )


@pytest.fixture
def clock():
    """Deterministic clock advancing one minute per call."""
    start = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    ticks = itertools.count()
    return lambda: start + timedelta(minutes=next(ticks))


@pytest.fixture
def ledger():
    return HistoryLedger()


@pytest.fixture
def engine(ledger, clock):
    ids = itertools.count(1)
    return AssessmentEngine(ledger=ledger, clock=clock, id_factory=lambda: f"entry-{next(ids)}")
