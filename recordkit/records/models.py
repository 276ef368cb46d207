"""Record-level models: input records, schemas and reports."""

from collections.abc import Mapping
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from recordkit.normalization.models import NormalizedField, RawField
from recordkit.validation.models import ValidationOutcome

# Keys of a flat record mapping that are record attributes, not fields
RECORD_KEYS = frozenset({"record_id", "country", "fields"})


class FieldState(str, Enum):
    """Lifecycle of a field inside the orchestrator."""

    RECEIVED = "received"
    NORMALIZED = "normalized"
    VALIDATED = "validated"
    REPORTED = "reported"


class CustomerRecord(BaseModel):
    """A raw customer record. Never mutated by the pipeline."""

    model_config = ConfigDict(frozen=True)

    record_id: str | None = Field(default=None, description="Caller's record identifier")
    country: str | None = Field(default=None, description="Record-level country hint")
    fields: dict[str, RawField] = Field(
        default_factory=dict, description="Fields by name, in input order"
    )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CustomerRecord":
        """Build a record from a plain mapping.

        Accepts {"record_id", "country", "fields": {name: value}} or a flat
        {name: value} mapping. A value is either the raw string or a mapping
        with "value" and optional "country", "kind" and "as_of" keys; the
        field name doubles as its kind unless "kind" says otherwise.
        """
        if isinstance(data.get("fields"), Mapping):
            items = data["fields"]
        else:
            items = {key: value for key, value in data.items() if key not in RECORD_KEYS}

        fields: dict[str, RawField] = {}
        for name, entry in items.items():
            if isinstance(entry, Mapping):
                as_of = entry.get("as_of")
                fields[name] = RawField(
                    kind=str(entry.get("kind", name)),
                    value=_as_text(entry.get("value")),
                    country=entry.get("country"),
                    as_of=date.fromisoformat(as_of) if isinstance(as_of, str) else as_of,
                )
            else:
                fields[name] = RawField(kind=name, value=_as_text(entry))

        record_id = data.get("record_id")
        return cls(
            record_id=str(record_id) if record_id is not None else None,
            country=data.get("country"),
            fields=fields,
        )


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return str(value)


class RecordSchema(BaseModel):
    """Which fields a record must carry and its default locale."""

    model_config = ConfigDict(frozen=True)

    mandatory: frozenset[str] | None = Field(
        default=None,
        description="Required field kinds; None means every present field",
    )
    default_country: str | None = Field(
        default=None, description="Country used when neither field nor record has one"
    )

    def is_mandatory(self, name: str, kind: str) -> bool:
        if self.mandatory is None:
            return True
        return name in self.mandatory or kind in self.mandatory


class FieldVerification(BaseModel):
    """Outcome of external verification for one field."""

    model_config = ConfigDict(frozen=True)

    collaborator: str
    available: bool = Field(..., description="False when the collaborator could not answer")
    verified: bool | None = Field(default=None, description="None when unavailable")
    canonical_form: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class FieldReport(BaseModel):
    """Everything the pipeline learned about one field."""

    model_config = ConfigDict(frozen=True)

    kind: str
    raw: str | None = None
    normalized: NormalizedField | None = None
    outcome: ValidationOutcome
    state: FieldState = FieldState.REPORTED
    mandatory: bool = True
    verification: FieldVerification | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "raw": self.raw,
            "normalized": self.normalized.value if self.normalized else None,
            "locale_used": self.normalized.locale if self.normalized else None,
            "outcome": self.outcome.status.value,
            "reason": self.outcome.reason,
            "confidence": self.outcome.confidence,
        }
        if self.normalized and self.normalized.attributes:
            data["attributes"] = dict(self.normalized.attributes)
        if self.outcome.expected_check is not None:
            data["expected_check"] = self.outcome.expected_check
        if self.outcome.supplied_check is not None:
            data["supplied_check"] = self.outcome.supplied_check
        if self.verification is not None:
            data["verification"] = self.verification.model_dump(mode="json")
        return data


class RecordReport(BaseModel):
    """Aggregate result for one record."""

    model_config = ConfigDict(frozen=True)

    record_id: str | None = None
    fields: dict[str, FieldReport] = Field(default_factory=dict)
    is_valid: bool
    error: str | None = Field(default=None, description="Set when the record itself failed")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "record_id": self.record_id,
            "is_valid": self.is_valid,
            "fields": {name: report.to_dict() for name, report in self.fields.items()},
        }
        if self.error is not None:
            data["error"] = self.error
        return data
