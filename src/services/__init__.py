from src.services import (
    caretaker_service,
    chore_service,
    history_service,
    tending_service,
)


__all__ = [
    "caretaker_service",
    "chore_service",
    "history_service",
    "tending_service",
]
