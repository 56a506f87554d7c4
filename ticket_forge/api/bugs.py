"""
Bug drafting and creation endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ticket_forge.api.dependencies import get_audit_logger, get_jira_client
from ticket_forge.models.results import BugCreationResult
from ticket_forge.models.ticket import BugDraft
from ticket_forge.services.audit_logger import AuditLogger
from ticket_forge.services.bug_reporter import create_bug
from ticket_forge.services.jira_client import JiraClient
from ticket_forge.services.llm_client import LLMClientError, draft_bug

router = APIRouter(prefix="/api/v1/bugs", tags=["bugs"])


class DraftBugRequest(BaseModel):
    """Request model for bug drafting."""

    model_config = ConfigDict(populate_by_name=True)

    project_key: str = Field(..., min_length=1, alias="projectKey")
    actual_behaviour: str = Field(..., alias="actualBehaviour", description="What happened")
    expected_behaviour: str = Field(..., alias="expectedBehaviour", description="What should have happened")
    environment_hint: Optional[str] = Field(None, alias="environmentHint")
    attachment_filename: Optional[str] = Field(None, alias="attachmentFilename")


class CreateBugRequest(BaseModel):
    """Request model for creating a reviewed bug draft in Jira."""

    model_config = ConfigDict(populate_by_name=True)

    project_key: str = Field(..., min_length=1, alias="projectKey")
    bug: BugDraft
    attachment_data_uri: Optional[str] = Field(None, alias="attachmentDataUri")
    attachment_filename: Optional[str] = Field(None, alias="attachmentFilename")


@router.post("/draft", response_model=BugDraft)
def draft(draft_request: DraftBugRequest) -> BugDraft:
    """Draft a structured bug report from the user's description."""
    if not draft_request.actual_behaviour.strip() or not draft_request.expected_behaviour.strip():
        raise HTTPException(status_code=400, detail="Please describe both the actual and expected behaviour")

    try:
        return draft_bug(
            draft_request.actual_behaviour,
            draft_request.expected_behaviour,
            project_key=draft_request.project_key,
            environment_hint=draft_request.environment_hint,
            attachment_filename=draft_request.attachment_filename,
        )
    except LLMClientError as e:
        raise HTTPException(status_code=502, detail=f"Bug drafting failed: {str(e)}")


@router.post("/create", response_model=BugCreationResult)
def create(
    create_request: CreateBugRequest,
    jira_client: JiraClient = Depends(get_jira_client),
    audit_logger: AuditLogger = Depends(get_audit_logger),
) -> BugCreationResult:
    """Create a reviewed bug draft in Jira, with optional attachment."""
    result = create_bug(
        jira_client,
        create_request.project_key,
        create_request.bug,
        attachment_data_uri=create_request.attachment_data_uri,
        attachment_filename=create_request.attachment_filename,
    )
    audit_logger.log_event({
        "operation": "create_bug",
        "project_key": create_request.project_key,
        "success": result.success,
        "created_keys": [result.ticket_key] if result.ticket_key else [],
        "failed": [] if result.success else [result.message],
        "message": result.message,
    })
    return result
