"""Parsing phase states and transition triggers."""

from enum import StrEnum


class PhaseState(StrEnum):
    """Whether metadata parsing is still accepting lines."""

    OPEN = "open"
    CLOSED = "closed"


class PhaseTrigger(StrEnum):
    """Events that end the metadata phase."""

    END_OF_MAPPING = "end_of_mapping"
    PROCESS_EXIT = "process_exit"
    PROGRESS = "progress"
