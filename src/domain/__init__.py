"""Domain models and DTOs."""

from src.domain.create_models import CaretakerCreate, ChoreCreate, TendCreate
from src.domain.instance import Caretaker, Chore, Instance, LastTended, TendingEntry
from src.domain.update_models import CaretakerUpdate, ChoreUpdate


__all__ = [
    "Caretaker",
    "CaretakerCreate",
    "CaretakerUpdate",
    "Chore",
    "ChoreCreate",
    "ChoreUpdate",
    "Instance",
    "LastTended",
    "TendCreate",
    "TendingEntry",
]
