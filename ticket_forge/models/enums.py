"""
Status and type enums for the application.
"""
from enum import Enum


class TicketKind(str, Enum):
    """Jira issue types a draft ticket can be created as."""

    EPIC = "Epic"
    STORY = "Story"
    TASK = "Task"
    SUB_TASK = "Sub-task"
    BUG = "Bug"

    @property
    def accepts_acceptance_criteria(self) -> bool:
        return self in (TicketKind.STORY, TicketKind.TASK)


class CreationStatus(str, Enum):
    """Lifecycle of a single draft node during hierarchy creation."""

    CREATED = "created"
    FAILED = "failed"
    SKIPPED = "skipped"
