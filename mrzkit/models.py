from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Dict, List, Mapping, Optional

SEX_VALUES = ("male", "female", "unspecified")


@dataclass(frozen=True)
class Range:
    line: int
    start: int
    end: int


@dataclass
class FieldDetail:
    label: str
    field: Optional[str]
    value: Optional[str]
    valid: bool
    ranges: List[Range]
    line: int
    start: int
    end: int
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "label": self.label,
            "field": self.field,
            "value": self.value,
            "valid": self.valid,
            "ranges": [asdict(r) for r in self.ranges],
            "line": self.line,
            "start": self.start,
            "end": self.end,
            "error": self.error,
            "error_kind": self.error_kind,
        }


@dataclass
class CorrectionMetrics:
    attempt_number: int
    total_attempts: int
    total_combinations: int
    correction_applied: bool


@dataclass
class ParseResult:
    valid: bool
    corrected: bool
    fields: Dict[str, Optional[str]]
    details: List[FieldDetail]
    lines: Dict[str, str]
    format: str = "TD3"
    correction_metrics: Optional[CorrectionMetrics] = None

    @property
    def document_number(self) -> Optional[str]:
        return self.fields.get("document_number") or None

    @property
    def line1(self) -> str:
        return self.lines["line1"]

    @property
    def line2(self) -> str:
        return self.lines["line2"]

    @property
    def errors(self) -> List[str]:
        return [f"{d.label}: {d.error or 'invalid'}" for d in self.details if not d.valid]

    def detail(self, name: str) -> FieldDetail:
        for item in self.details:
            if item.field == name:
                return item
        raise KeyError(name)

    def to_dict(self) -> Dict[str, object]:
        return {
            "format": self.format,
            "valid": self.valid,
            "corrected": self.corrected,
            "document_number": self.document_number,
            "fields": dict(self.fields),
            "details": [d.to_dict() for d in self.details],
            "lines": dict(self.lines),
            "correction_metrics": asdict(self.correction_metrics) if self.correction_metrics else None,
        }


@dataclass(frozen=True)
class MRZDate:
    year: int
    month: int
    day: int

    @classmethod
    def parse(cls, value: object) -> "MRZDate":
        """Accept an MRZDate, a ``date``, a ``{year, month, day}`` mapping or an ISO string."""
        if isinstance(value, MRZDate):
            return value
        if isinstance(value, date):
            return cls(value.year, value.month, value.day)
        if isinstance(value, Mapping):
            try:
                return cls(int(value["year"]), int(value["month"]), int(value["day"]))
            except KeyError as exc:
                raise ValueError(f"Date is missing {exc.args[0]!r}") from exc
        if isinstance(value, str):
            try:
                parsed = date.fromisoformat(value.strip())
            except ValueError as exc:
                raise ValueError(f"Invalid date: {value!r}, expected YYYY-MM-DD") from exc
            return cls(parsed.year, parsed.month, parsed.day)
        raise ValueError(f"Unsupported date value: {value!r}")


@dataclass
class MRZInput:
    document_code: str
    issuing_state: str
    last_name: str
    first_name: str
    document_number: str
    nationality: str
    birth_date: MRZDate
    sex: str
    expiration_date: MRZDate
    personal_number: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "MRZInput":
        required = (
            "document_code",
            "issuing_state",
            "last_name",
            "first_name",
            "document_number",
            "nationality",
            "birth_date",
            "sex",
            "expiration_date",
        )
        missing = [key for key in required if data.get(key) is None]
        if missing:
            raise ValueError(f"Missing required field(s): {', '.join(missing)}")
        personal = data.get("personal_number")
        return cls(
            document_code=str(data["document_code"]),
            issuing_state=str(data["issuing_state"]),
            last_name=str(data["last_name"]),
            first_name=str(data["first_name"]),
            document_number=str(data["document_number"]),
            nationality=str(data["nationality"]),
            birth_date=MRZDate.parse(data["birth_date"]),
            sex=str(data["sex"]).lower(),
            expiration_date=MRZDate.parse(data["expiration_date"]),
            personal_number=str(personal) if personal is not None else None,
        )


__all__ = [
    "CorrectionMetrics",
    "FieldDetail",
    "MRZDate",
    "MRZInput",
    "ParseResult",
    "Range",
    "SEX_VALUES",
]
