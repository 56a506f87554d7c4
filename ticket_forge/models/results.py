"""
Result models for ticket creation.
"""
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ticket_forge.models.enums import CreationStatus, TicketKind


class CreatedItem(BaseModel):
    """Identity Jira assigned to a newly created issue."""

    key: str = Field(..., description="Tracker-visible key (e.g. PROJ-123)")
    id: str = Field(..., description="Internal Jira issue ID")


class NodeOutcome(BaseModel):
    """What happened to one draft node during hierarchy creation."""

    path: Tuple[int, ...] = Field(..., description="Index path of the node in the draft tree")
    kind: TicketKind
    summary: str
    status: CreationStatus
    key: Optional[str] = None
    id: Optional[str] = None
    error: Optional[str] = None


class CreatedTicket(BaseModel):
    """Created ticket as reported back to the caller."""

    key: str
    summary: str
    type: TicketKind


class AggregateResult(BaseModel):
    """
    Outcome of a hierarchy creation run.

    Serialises to ``{success, message, createdTickets}``. Per-node outcomes are
    kept on the object for logging and auditing but are not part of the
    response shape.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    created_tickets: List[CreatedTicket] = Field(default_factory=list, alias="createdTickets")
    outcomes: List[NodeOutcome] = Field(default_factory=list, exclude=True)

    @property
    def overall_success(self) -> bool:
        return self.success

    @property
    def failures(self) -> List[NodeOutcome]:
        return [o for o in self.outcomes if o.status == CreationStatus.FAILED]

    @property
    def skipped(self) -> List[NodeOutcome]:
        return [o for o in self.outcomes if o.status == CreationStatus.SKIPPED]


class BugCreationResult(BaseModel):
    """Outcome of creating a single bug in Jira."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    ticket_key: Optional[str] = Field(None, alias="ticketKey")
    ticket_url: Optional[str] = Field(None, alias="ticketUrl")
