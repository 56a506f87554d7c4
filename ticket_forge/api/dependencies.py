"""
Shared FastAPI dependencies.
"""
from fastapi import HTTPException

from ticket_forge.config import settings
from ticket_forge.services.audit_logger import AuditLogger
from ticket_forge.services.jira_client import JiraClient, JiraClientError


def get_jira_client() -> JiraClient:
    """Build a Jira client from settings (HTTP 500 if not configured)."""
    try:
        settings.require_jira_credentials()
        return JiraClient(
            base_url=settings.jira_base_url,
            username=settings.jira_email,
            api_token=settings.jira_api_token,
            timeout=settings.jira_api_timeout,
            acceptance_criteria_field_id=settings.jira_acceptance_criteria_field_id,
        )
    except (ValueError, JiraClientError) as e:
        raise HTTPException(status_code=500, detail=f"Configuration error: {str(e)}")


def get_audit_logger() -> AuditLogger:
    return AuditLogger(settings.audit_log_dir)
