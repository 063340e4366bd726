"""Tests for the assessment engine and caller sessions."""
from datetime import datetime, timezone

import pytest

from livercare.engine import AssessmentEngine, AssessmentSession
from livercare.errors import ValidationError
from livercare.history import HistoryLedger
from livercare.models import PatientRecord, RiskLevel


class TestAssess:
    def test_scenario_a(self, engine, scenario_a):
        result = engine.assess(scenario_a)
        assert result.risk_score == 0
        assert result.risk_level is RiskLevel.low
        assert result.confidence == 90
        assert result.recommendations[0] == "Continue regular health maintenance"
        assert len(result.recommendations) == 5

    def test_scenario_b(self, engine, scenario_b):
        result = engine.assess(scenario_b)
        assert (result.risk_score, result.risk_level, result.confidence) == (57, RiskLevel.medium, 90)
        assert len(result.recommendations) == 9

    def test_scenario_c(self, engine, scenario_c):
        result = engine.assess(scenario_c)
        assert (result.risk_score, result.risk_level, result.confidence) == (100, RiskLevel.high, 96)
        assert result.recommendations[-1] == "Ensure proper diabetes management and monitoring"

    def test_timestamp_from_clock(self, engine, scenario_a):
        result = engine.assess(scenario_a)
        assert result.timestamp == datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)

    def test_feature_snapshot(self, engine, scenario_c):
        features = engine.assess(scenario_c).features
        assert features.bilirubin == 3.0
        assert features.prothrombin == 15.0
        assert features.copper is None

    def test_accepts_mapping(self, engine):
        result = engine.assess({"age": 45, "bilirubin": 1.0, "albumin": 4.0, "platelets": 200})
        assert result.risk_score == 0
        assert len(engine.history) == 1


class TestLedgerEffects:
    def test_one_entry_per_success(self, engine, scenario_a, scenario_b):
        engine.assess(scenario_a)
        engine.assess(scenario_b)
        entries = engine.history.list()
        assert [e.id for e in entries] == ["entry-2", "entry-1"]
        assert entries[0].patient_data == scenario_b
        assert entries[0].timestamp == entries[0].prediction_result.timestamp

    def test_failure_leaves_ledger_untouched(self, engine, scenario_a):
        engine.assess(scenario_a)
        with pytest.raises(ValidationError):
            engine.assess({"age": 50, "bilirubin": 1.2, "albumin": 3.9})
        assert len(engine.history) == 1

    def test_constructed_record_rejected(self, engine):
        rec = PatientRecord.model_construct(age=50, bilirubin=1.0, albumin=4.0)
        with pytest.raises(ValidationError):
            engine.assess(rec)
        assert len(engine.history) == 0

    def test_constructed_record_without_age_rejected(self, engine):
        rec = PatientRecord.model_construct(bilirubin=3.0, albumin=2.0, platelets=100)
        with pytest.raises(ValidationError):
            engine.assess(rec)
        assert len(engine.history) == 0

    def test_repeat_assessment_is_pure(self, engine, scenario_b):
        first = engine.assess(scenario_b)
        second = engine.assess(scenario_b)
        entries = engine.history.list()
        assert len(entries) == 2
        assert entries[0].id != entries[1].id
        assert first.timestamp != second.timestamp
        assert first.content() == second.content()

    def test_evaluate_does_not_record(self, engine, scenario_b):
        result = engine.evaluate(scenario_b)
        assert result.risk_score == 57
        assert len(engine.history) == 0

    def test_default_ids_unique(self, scenario_a):
        engine = AssessmentEngine()
        engine.assess(scenario_a)
        engine.assess(scenario_a)
        ids = {e.id for e in engine.history.list()}
        assert len(ids) == 2

    def test_shared_ledger(self, scenario_a):
        ledger = HistoryLedger()
        AssessmentEngine(ledger=ledger).assess(scenario_a)
        AssessmentEngine(ledger=ledger).assess(scenario_a)
        assert len(ledger) == 2


class TestExplain:
    def test_explain_hits(self, engine, scenario_b):
        names = [h.name for h in engine.explain(scenario_b)]
        assert names == ["bilirubin", "albumin", "platelets", "history_of_alcohol", "age_over_60"]
        assert len(engine.history) == 0

    def test_explain_validates(self, engine):
        with pytest.raises(ValidationError):
            engine.explain({"age": 50})


class TestSession:
    def test_last_result_is_per_session(self, engine, scenario_a, scenario_c):
        one = AssessmentSession(engine)
        two = AssessmentSession(engine)
        one.assess(scenario_a)
        two.assess(scenario_c)
        assert one.last_result.risk_level is RiskLevel.low
        assert two.last_result.risk_level is RiskLevel.high
        assert len(engine.history) == 2

    def test_failed_assess_keeps_previous(self, engine, scenario_a):
        session = AssessmentSession(engine)
        session.assess(scenario_a)
        with pytest.raises(ValidationError):
            session.assess({"age": 1})
        assert session.last_result is not None

    def test_clear(self, engine, scenario_a):
        session = AssessmentSession(engine)
        session.assess(scenario_a)
        session.clear()
        assert session.last_result is None
