# backend/livercare/models.py
import math
from datetime import datetime
from enum import Enum as PyEnum
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import ValidationError


# -------------------------
# Enums
# -------------------------
class Gender(PyEnum):
    male = "male"
    female = "female"
    other = "other"


class RiskLevel(str, PyEnum):
    low = "Low"
    medium = "Medium"
    high = "High"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]


_LEVEL_RANK = {RiskLevel.low: 0, RiskLevel.medium: 1, RiskLevel.high: 2}


# -------------------------
# Patient Record
# -------------------------
MANDATORY_LABS = ("bilirubin", "albumin", "platelets")
OPTIONAL_LABS = ("copper", "alkaline_phosphatase", "sgot", "prothrombin")
FLAG_FIELDS = ("history_of_alcohol", "hepatitis", "diabetes")

BOOL_POS = {"1", "true", "t", "yes", "y", "on"}


def _cast_bool(v: object) -> bool:
    return str(v).strip().lower() in BOOL_POS


class PatientRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    age: int = Field(..., ge=0)
    gender: str = Gender.other.value

    # Mandatory labs
    bilirubin: float   # mg/dL
    albumin: float     # g/dL
    platelets: int     # x10^3/uL

    # Optional labs; None means "not measured"
    copper: Optional[float] = None
    alkaline_phosphatase: Optional[float] = None
    sgot: Optional[float] = None
    prothrombin: Optional[float] = None  # seconds

    history_of_alcohol: bool = False
    hepatitis: bool = False
    diabetes: bool = False

    @field_validator("age", *MANDATORY_LABS, *OPTIONAL_LABS, mode="before")
    @classmethod
    def _reject_bool(cls, v):
        # bool is an int subclass; a checkbox value is never a lab reading
        if isinstance(v, bool):
            raise ValueError("must be numeric")
        return v

    @field_validator("bilirubin", "albumin", *OPTIONAL_LABS)
    @classmethod
    def _finite(cls, v):
        if v is not None and not math.isfinite(v):
            raise ValueError("must be a finite number")
        return v

    @field_validator("gender", mode="before")
    @classmethod
    def _normalize_gender(cls, v):
        if v is None:
            return Gender.other.value
        if isinstance(v, Gender):
            return v.value
        return str(v).strip().lower() or Gender.other.value

    @property
    def gender_category(self) -> Gender:
        try:
            return Gender(self.gender)
        except ValueError:
            return Gender.other

    @classmethod
    def from_form(cls, payload: Optional[Mapping[str, Any]]) -> "PatientRecord":
        """Build a record from a raw form submission.

        Blank strings mean "not entered": optional labs become absent, flags
        become False, and a blank mandatory lab fails validation.
        """
        data: Dict[str, Any] = {}
        for key, val in dict(payload or {}).items():
            if isinstance(val, str):
                val = val.strip()
                if val == "":
                    val = None
            if key in FLAG_FIELDS:
                val = False if val is None else (val if isinstance(val, bool) else _cast_bool(val))
            data[key] = val
        return validate_record(data)


def validate_record(data: Any) -> PatientRecord:
    """Return a validated PatientRecord or raise ValidationError."""
    if isinstance(data, PatientRecord):
        require_mandatory(data)
        return data
    if not isinstance(data, Mapping):
        raise ValidationError(
            "Patient record must be a mapping",
            [{"field": "record", "message": f"got {type(data).__name__}"}],
        )
    try:
        return PatientRecord.model_validate(dict(data))
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def require_mandatory(record: PatientRecord) -> None:
    # Guards records built with model_construct(), which skips validation.
    errors = []
    age = getattr(record, "age", None)
    if age is None:
        errors.append({"field": "age", "message": "Field required"})
    elif isinstance(age, bool) or not isinstance(age, int) or age < 0:
        errors.append({"field": "age", "message": "must be a non-negative integer"})
    for name in MANDATORY_LABS:
        val = getattr(record, name, None)
        if val is None:
            errors.append({"field": name, "message": "Field required"})
        elif isinstance(val, bool) or not isinstance(val, (int, float)) or val != val:
            errors.append({"field": name, "message": "must be numeric"})
    if errors:
        fields = ", ".join(e["field"] for e in errors)
        raise ValidationError(f"Invalid patient record: {fields}", errors)


# -------------------------
# Assessment output
# -------------------------
class FeatureSnapshot(BaseModel):
    """Lab values used for an assessment. Absent optional labs stay None."""

    model_config = ConfigDict(frozen=True)

    bilirubin: float
    albumin: float
    platelets: int
    copper: Optional[float] = None
    alkaline_phosphatase: Optional[float] = None
    sgot: Optional[float] = None
    prothrombin: Optional[float] = None

    @classmethod
    def from_record(cls, record: PatientRecord) -> "FeatureSnapshot":
        return cls(**{name: getattr(record, name) for name in MANDATORY_LABS + OPTIONAL_LABS})

    def materialized(self) -> Dict[str, float]:
        # Display form: absent labs render as 0
        return {
            name: (0 if getattr(self, name) is None else getattr(self, name))
            for name in MANDATORY_LABS + OPTIONAL_LABS
        }


class _CamelModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class AssessmentResult(_CamelModel):
    risk_score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    confidence: int = Field(..., ge=0, le=98)
    recommendations: Tuple[str, ...] = Field(..., min_length=1)
    features: FeatureSnapshot
    timestamp: datetime

    @field_serializer("features", when_used="json")
    def _materialize_features(self, features: FeatureSnapshot):
        return features.materialized()

    def content(self) -> Dict[str, Any]:
        """Everything except the creation time; equal for equal inputs."""
        return self.model_dump(exclude={"timestamp"})


class HistoryEntry(_CamelModel):
    id: str
    timestamp: datetime
    patient_data: PatientRecord
    prediction_result: AssessmentResult
