"""Pydantic models validating request bodies that create records."""

from typing import Any

from pydantic import BaseModel, Field, StrictStr, field_validator, model_validator


def _require_text(v: str) -> str:
    """Strip a string and reject it when nothing is left."""
    stripped = v.strip()
    if not stripped:
        msg = "Value must be a non-empty string"
        raise ValueError(msg)
    return stripped


class CaretakerCreate(BaseModel):
    """Body for POST /caretakers."""

    name: StrictStr = Field(..., description="Caretaker display name")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is not blank."""
        return _require_text(v)


class ChoreCreate(BaseModel):
    """Body for POST /chores."""

    name: StrictStr = Field(..., description="Chore name")
    icon: StrictStr = Field(..., description="Chore icon")

    @field_validator("name", "icon")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """Validate name and icon are not blank."""
        return _require_text(v)


class TendCreate(BaseModel):
    """Body for POST /tend.

    Older clients send the caretaker's name as ``tender``; the current client
    sends ``caretaker``. Either is accepted, ``tender`` wins when both are set.
    """

    tender: StrictStr | None = Field(default=None, description="Name of the caretaker who tended")
    caretaker: StrictStr | None = Field(default=None, description="Alias of tender")
    choreId: StrictStr = Field(..., description="ID of the tended chore")  # noqa: N815
    notes: Any = Field(default=None, description="Optional notes, ignored unless a string")

    @field_validator("choreId")
    @classmethod
    def validate_chore_id(cls, v: str) -> str:
        """Validate chore id is not blank."""
        return _require_text(v)

    @field_validator("notes")
    @classmethod
    def normalize_notes(cls, v: Any) -> str | None:
        """Keep string notes (trimmed) and drop anything else."""
        if isinstance(v, str) and v.strip():
            return v.strip()
        return None

    @model_validator(mode="after")
    def validate_tender(self) -> "TendCreate":
        """Validate one of tender/caretaker names someone."""
        for candidate in (self.tender, self.caretaker):
            if candidate and candidate.strip():
                self.tender = candidate.strip()
                return self
        msg = "A tender or caretaker name is required"
        raise ValueError(msg)
