"""Instance aggregate: everything stored under one sync code."""

from pydantic import BaseModel, Field

from src.core.config import constants


class Caretaker(BaseModel):
    """Person who can be credited with tending a chore."""

    id: str = Field(..., description="Generated caretaker ID (c_<ts>_<rand>)")
    name: str = Field(..., description="Display name")


class Chore(BaseModel):
    """Chore definition shown on the client's board."""

    id: str = Field(..., description="Generated chore ID (chore_<ts>_<rand>)")
    name: str = Field(..., description="Chore name (e.g., 'Water the plants')")
    icon: str = Field(..., description="Emoji or short icon text")


class TendingEntry(BaseModel):
    """One caretaker completing one chore at a point in time."""

    id: str = Field(..., description="Generated history ID (h_<ts>_<rand>)")
    timestamp: int = Field(..., description="When the chore was tended (ms since epoch)")
    person: str = Field(..., description="Name of the caretaker credited")
    chore_id: str = Field(..., description="ID of the chore; may no longer exist")
    notes: str | None = Field(default=None, description="Free-text notes")


class LastTended(BaseModel):
    """Instance-wide most recent tending event."""

    lastTended: int | None = Field(default=None, description="Timestamp of the latest event")  # noqa: N815
    lastTender: str | None = Field(default=None, description="Caretaker credited with the latest event")  # noqa: N815


class Instance(BaseModel):
    """Full state for one sync code, persisted as a single row."""

    schema_version: int = Field(default=constants.SCHEMA_VERSION, description="Row layout version")
    caretakers: list[Caretaker] = Field(default_factory=list)
    chores: list[Chore] = Field(default_factory=list)
    tending_log: list[TendingEntry] = Field(default_factory=list)
    last_tended_timestamp: int | None = None
    last_tender: str | None = None

    def find_caretaker(self, caretaker_id: str) -> Caretaker | None:
        return next((c for c in self.caretakers if c.id == caretaker_id), None)

    def find_chore(self, chore_id: str) -> Chore | None:
        return next((c for c in self.chores if c.id == chore_id), None)

    def record_tending(self, entry: TendingEntry) -> None:
        """Append a log entry and point the last-tended cache at it."""
        self.tending_log.append(entry)
        self.last_tended_timestamp = entry.timestamp
        self.last_tender = entry.person

    def recompute_last_tended(self) -> None:
        """Reset the last-tended cache from the newest remaining log entry."""
        if not self.tending_log:
            self.last_tended_timestamp = None
            self.last_tender = None
            return

        latest = self.tending_log[0]
        for entry in self.tending_log[1:]:
            if entry.timestamp > latest.timestamp:
                latest = entry
        self.last_tended_timestamp = latest.timestamp
        self.last_tender = latest.person

    def sorted_history(self) -> list[TendingEntry]:
        """Tending log ordered newest first."""
        return sorted(self.tending_log, key=lambda entry: entry.timestamp, reverse=True)

    def last_tended(self) -> LastTended:
        return LastTended(lastTended=self.last_tended_timestamp, lastTender=self.last_tender)
