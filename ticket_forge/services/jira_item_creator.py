"""
Creates individual draft tickets in Jira for the hierarchy orchestrator.
"""
import logging
from typing import Any, Dict, Optional, Union

from ticket_forge.models.adf import Document, parse_document
from ticket_forge.models.enums import TicketKind
from ticket_forge.models.results import CreatedItem
from ticket_forge.services.jira_client import JiraClient, JiraClientError
from ticket_forge.services.markdown_encoder import markdown_to_adf

logger = logging.getLogger(__name__)

ACCEPTANCE_CRITERIA_HEADING = "## Acceptance Criteria"


class JiraItemCreator:
    """
    ``CreateItem`` implementation backed by the Jira REST API.

    Field mapping varies per Jira instance:
    - Acceptance criteria go to ``acceptance_criteria_field_id`` when set,
      otherwise they are appended to the description under a heading.
    - Epic membership uses ``epic_link_field_id`` (company-managed projects
      with the legacy Epic Link field) when set, otherwise the ``parent`` field.
    - ``epic_name_field_id`` receives the summary when creating an Epic.
    """

    def __init__(
        self,
        client: JiraClient,
        project_key: str,
        acceptance_criteria_field_id: Optional[str] = None,
        epic_link_field_id: Optional[str] = None,
        epic_name_field_id: Optional[str] = None
    ):
        self.client = client
        self.project_key = project_key
        self.acceptance_criteria_field_id = acceptance_criteria_field_id
        self.epic_link_field_id = epic_link_field_id
        self.epic_name_field_id = epic_name_field_id

    def __call__(
        self,
        kind: TicketKind,
        summary: str,
        description: Union[str, Dict[str, Any]],
        parent_key: Optional[str] = None,
        epic_key: Optional[str] = None,
        acceptance_criteria: Optional[str] = None,
    ) -> CreatedItem:
        fields: Dict[str, Any] = {}

        if kind == TicketKind.SUB_TASK:
            if not parent_key:
                raise JiraClientError("Sub-task requires a parent issue key")
            fields["parent"] = {"key": parent_key}
        elif epic_key:
            if self.epic_link_field_id:
                fields[self.epic_link_field_id] = epic_key
            else:
                fields["parent"] = {"key": epic_key}

        if kind == TicketKind.EPIC and self.epic_name_field_id:
            fields[self.epic_name_field_id] = summary

        inline_criteria = None
        if acceptance_criteria and acceptance_criteria.strip():
            if self.acceptance_criteria_field_id:
                criteria_doc = markdown_to_adf(acceptance_criteria)
                fields[self.acceptance_criteria_field_id] = criteria_doc.to_adf()
            else:
                inline_criteria = acceptance_criteria

        document = build_description(description, inline_criteria)
        response = self.client.create_issue(
            project_key=self.project_key,
            issue_type=kind.value,
            summary=summary,
            description_adf=document.to_adf() if document else None,
            fields=fields or None,
        )
        return CreatedItem(key=response["key"], id=str(response.get("id", "")))


def build_description(
    description: Union[str, Dict[str, Any], None],
    acceptance_criteria: Optional[str] = None
) -> Optional[Document]:
    """
    Build the ADF description for a ticket.

    Args:
        description: Markdown text or an already-encoded ADF document
        acceptance_criteria: Optional criteria appended under an "Acceptance Criteria" heading

    Returns:
        ADF Document, or None when there is nothing to send

    Raises:
        AdfValidationError: If a pre-encoded description uses unsupported nodes
    """
    if isinstance(description, dict):
        document = parse_document(description)
    else:
        document = markdown_to_adf(description)

    if not acceptance_criteria:
        return document

    criteria_doc = markdown_to_adf(f"{ACCEPTANCE_CRITERIA_HEADING}\n{acceptance_criteria}")
    if document is None:
        return criteria_doc
    return Document(content=list(document.content) + list(criteria_doc.content))
