"""Update models for request bodies that modify records."""

from typing import Any

from pydantic import BaseModel, StrictStr, field_validator, model_validator


class CaretakerUpdate(BaseModel):
    """Update payload for a caretaker's name."""

    name: StrictStr

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is not blank."""
        stripped = v.strip()
        if not stripped:
            msg = "Value must be a non-empty string"
            raise ValueError(msg)
        return stripped


class ChoreUpdate(BaseModel):
    """Update payload for a chore's name and/or icon.

    Only fields that are non-blank strings are applied. The payload is rejected
    only when neither field is usable, so ``{"name": "Dishes", "icon": 5}``
    renames the chore and leaves its icon alone.
    """

    name: Any = None
    icon: Any = None

    @field_validator("name", "icon")
    @classmethod
    def keep_text(cls, v: Any) -> str | None:
        """Reduce a field to its trimmed string, or None if unusable."""
        if isinstance(v, str) and v.strip():
            return v.strip()
        return None

    @model_validator(mode="after")
    def validate_any_field(self) -> "ChoreUpdate":
        """Validate at least one of name/icon was provided."""
        if self.name is None and self.icon is None:
            msg = "Either name or icon must be a non-empty string"
            raise ValueError(msg)
        return self
