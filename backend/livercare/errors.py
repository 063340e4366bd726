# backend/livercare/errors.py
from typing import Dict, List, Optional


class ValidationError(ValueError):
    """A Patient Record is missing a mandatory field or holds a bad value."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        errors = []
        for err in exc.errors():
            field = ".".join(str(p) for p in err.get("loc", ())) or "record"
            errors.append({"field": field, "message": err.get("msg", "invalid value")})
        fields = ", ".join(e["field"] for e in errors)
        return cls(f"Invalid patient record: {fields}", errors)


class NotFoundError(LookupError):
    def __init__(self, entry_id: str):
        super().__init__(f"No assessment recorded with id {entry_id!r}")
        self.entry_id = entry_id
