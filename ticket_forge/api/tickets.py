"""
Document analysis and hierarchical ticket creation endpoints.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from ticket_forge.api.dependencies import get_audit_logger, get_jira_client
from ticket_forge.config import settings
from ticket_forge.models.results import AggregateResult
from ticket_forge.models.ticket import TicketDraft
from ticket_forge.services.attachment_parser import AttachmentParserError, extract_text_from_attachment
from ticket_forge.services.audit_logger import AuditLogger
from ticket_forge.services.jira_client import JiraClient
from ticket_forge.services.jira_item_creator import JiraItemCreator
from ticket_forge.services.llm_client import LLMClientError, analyze_document
from ticket_forge.services.ticket_orchestrator import TicketHierarchyOrchestrator

logger = logging.getLogger(__name__)

# Input guardrails
MAX_DOC_UPLOAD_MB = 15
MAX_DOCUMENT_CHARS = 100_000
MAX_TICKETS_PER_RUN = 200

router = APIRouter(prefix="/api/v1/tickets", tags=["tickets"])


class AnalyzeDocumentResponse(BaseModel):
    tickets: List[TicketDraft] = Field(default_factory=list)


class CreateTicketsRequest(BaseModel):
    """Request model for hierarchical ticket creation."""

    model_config = ConfigDict(populate_by_name=True)

    project_key: str = Field(..., min_length=1, alias="projectKey", description="Jira project key")
    tickets: List[TicketDraft] = Field(..., description="Top-level draft tickets (reviewed by the user)")


@router.post("/analyze", response_model=AnalyzeDocumentResponse)
async def analyze(
    file: UploadFile = File(...),
    project_key: str = Form(...),
    project_name: str = Form(...),
    user_persona: Optional[str] = Form(None),
    output_format_preference: Optional[str] = Form(None),
) -> AnalyzeDocumentResponse:
    """
    Draft a ticket hierarchy from an uploaded requirements document.

    Returns drafts only; nothing is created in Jira.
    """
    content = await file.read()
    if len(content) > MAX_DOC_UPLOAD_MB * 1024 * 1024:
        raise HTTPException(status_code=400, detail=f"Document exceeds {MAX_DOC_UPLOAD_MB} MB limit")

    try:
        document_text = extract_text_from_attachment(content, file.filename or "document", file.content_type)
    except AttachmentParserError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not document_text.strip():
        raise HTTPException(status_code=400, detail="Document contains no readable text")
    if len(document_text) > MAX_DOCUMENT_CHARS:
        logger.warning(f"Truncating document {file.filename} from {len(document_text)} to {MAX_DOCUMENT_CHARS} chars")
        document_text = document_text[:MAX_DOCUMENT_CHARS]

    try:
        tickets = analyze_document(
            document_text,
            project_key=project_key,
            project_name=project_name,
            user_persona=user_persona,
            output_format_preference=output_format_preference,
        )
    except LLMClientError as e:
        raise HTTPException(status_code=502, detail=f"Document analysis failed: {str(e)}")

    logger.info(f"Drafted {len(tickets)} top-level ticket(s) for {project_key} from {file.filename}")
    return AnalyzeDocumentResponse(tickets=tickets)


@router.post("/create", response_model=AggregateResult)
def create_tickets(
    create_request: CreateTicketsRequest,
    jira_client: JiraClient = Depends(get_jira_client),
    audit_logger: AuditLogger = Depends(get_audit_logger),
) -> AggregateResult:
    """
    Create a reviewed draft hierarchy in Jira, parents before children.

    Partial failures are reported in the response body, not as HTTP errors.
    """
    total = sum(ticket.count() for ticket in create_request.tickets)
    if total > MAX_TICKETS_PER_RUN:
        raise HTTPException(
            status_code=400,
            detail=f"Too many tickets in one run ({total}); the limit is {MAX_TICKETS_PER_RUN}"
        )

    creator = JiraItemCreator(
        jira_client,
        project_key=create_request.project_key,
        acceptance_criteria_field_id=settings.jira_acceptance_criteria_field_id,
        epic_link_field_id=settings.jira_epic_link_field_id,
        epic_name_field_id=settings.jira_epic_name_field_id,
    )
    result = TicketHierarchyOrchestrator(creator).create(create_request.tickets)

    audit_logger.log_event({
        "operation": "create_hierarchy",
        "project_key": create_request.project_key,
        "success": result.success,
        "created_keys": [ticket.key for ticket in result.created_tickets],
        "failed": [outcome.error for outcome in result.failures],
        "message": result.message,
    })
    return result
