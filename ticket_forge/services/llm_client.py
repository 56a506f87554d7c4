"""
OpenAI LLM client for drafting Jira tickets, bug reports and test cases.

Drafts are advisory only: they are shown to the user for review and editing
before anything is created in Jira.
"""
import json
import logging
from typing import Any, Dict, List, Optional
from openai import OpenAI, APIError
from pydantic import ValidationError
from ticket_forge.config import settings
from ticket_forge.agent.prompt import (
    get_planner_system_prompt,
    get_document_analysis_prompt,
    get_bug_system_prompt,
    get_bug_draft_prompt,
    get_test_case_system_prompt,
    get_test_case_prompt,
)
from ticket_forge.models.ticket import BugDraft, GeneratedTestCase, TicketDraft

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "QA"


class LLMClientError(Exception):
    """Raised when LLM API call or response parsing fails."""
    pass


def _complete_json(system_prompt: str, user_message: str) -> Optional[Dict[str, Any]]:
    """
    Run a chat completion in JSON mode.

    Returns:
        Parsed JSON object, or None if the model returned no content

    Raises:
        LLMClientError: If the API key is missing, the call fails or the content is not JSON
    """
    if not settings.openai_api_key:
        raise LLMClientError("OpenAI API key not configured. Set OPENAI_API_KEY environment variable.")

    try:
        client = OpenAI(api_key=settings.openai_api_key)
        response = client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message}
            ],
            response_format={"type": "json_object"},
            temperature=0.3
        )
    except APIError as e:
        raise LLMClientError(f"OpenAI API error: {str(e)}")

    if not response.choices:
        return None
    content = response.choices[0].message.content
    if not content or not content.strip():
        return None

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise LLMClientError(f"Failed to parse JSON response: {str(e)}")
    if not isinstance(data, dict):
        raise LLMClientError("OpenAI API returned JSON that is not an object")
    return data


def analyze_document(
    document_text: str,
    project_key: str,
    project_name: str,
    user_persona: Optional[str] = None,
    output_format_preference: Optional[str] = None
) -> List[TicketDraft]:
    """
    Break a requirements document into a draft ticket hierarchy.

    Args:
        document_text: Extracted text of the document
        project_key: Jira project key
        project_name: Jira project name
        user_persona: Optional target user persona
        output_format_preference: Optional output preference

    Returns:
        Top-level TicketDraft list (empty if the model produced nothing)

    Raises:
        LLMClientError: If the call fails or the output does not match the ticket schema
    """
    user_message = get_document_analysis_prompt(
        document_text,
        project_key=project_key,
        project_name=project_name,
        user_persona=user_persona,
        output_format_preference=output_format_preference,
    )
    data = _complete_json(get_planner_system_prompt(), user_message)
    if not data:
        logger.warning(f"Document analysis returned no output for project {project_key}")
        return []

    try:
        return [TicketDraft.model_validate(ticket) for ticket in data.get("tickets") or []]
    except ValidationError as e:
        raise LLMClientError(f"Response does not match the ticket draft schema: {str(e)}")


def draft_bug(
    actual_behaviour: str,
    expected_behaviour: str,
    project_key: str,
    environment_hint: Optional[str] = None,
    attachment_filename: Optional[str] = None
) -> BugDraft:
    """
    Draft a structured bug report from the user's narrative.

    Args:
        actual_behaviour: What the user observed
        expected_behaviour: What the user expected
        project_key: Jira project key
        environment_hint: Optional environment selected by the user
        attachment_filename: Optional attachment file name

    Returns:
        BugDraft; a placeholder draft if the model produced nothing

    Raises:
        LLMClientError: If the call fails or the output does not match the bug schema
    """
    user_message = get_bug_draft_prompt(
        actual_behaviour,
        expected_behaviour,
        project_key=project_key,
        environment_hint=environment_hint,
        attachment_filename=attachment_filename,
    )
    data = _complete_json(get_bug_system_prompt(), user_message)
    if not data:
        logger.warning(f"Bug drafting returned no output for: {actual_behaviour[:50]}...")
        return BugDraft(
            summary="Error: AI failed to draft bug report",
            description_markdown=(
                "## Environment\nUnknown\n\n"
                "## Issue Description\nCould not process the bug description.\n\n"
                "## Steps to Reproduce\n1. Unknown\n\n"
                "## Expected Result\nCould not process the bug description.\n\n"
                "## Actual Result\nCould not process the bug description."
            ),
            identified_environment=environment_hint or "Unknown",
        )

    if not data.get("identifiedEnvironment"):
        data["identifiedEnvironment"] = environment_hint or DEFAULT_ENVIRONMENT
    if attachment_filename and not data.get("attachmentName"):
        data["attachmentName"] = attachment_filename

    try:
        return BugDraft.model_validate(data)
    except ValidationError as e:
        raise LLMClientError(f"Response does not match the bug draft schema: {str(e)}")


def generate_test_cases(
    description: Optional[str],
    acceptance_criteria: Optional[str] = None,
    issue_key: Optional[str] = None
) -> List[GeneratedTestCase]:
    """
    Generate manual test cases for a Jira issue.

    Args:
        description: Plain-text issue description
        acceptance_criteria: Optional plain-text acceptance criteria
        issue_key: Optional issue key used to prefix test case IDs

    Returns:
        GeneratedTestCase list (empty if there is nothing to test or the model produced nothing)

    Raises:
        LLMClientError: If the call fails or the output does not match the test case schema
    """
    description = (description or "").strip()
    acceptance_criteria = (acceptance_criteria or "").strip()
    if not description and not acceptance_criteria:
        logger.info(f"Skipping test case generation for {issue_key or 'issue'}: no description or acceptance criteria")
        return []

    user_message = get_test_case_prompt(description, acceptance_criteria or None, issue_key=issue_key)
    data = _complete_json(get_test_case_system_prompt(), user_message)
    if not data:
        logger.warning(f"Test case generation returned no output for {issue_key or description[:50]}")
        return []

    try:
        return [GeneratedTestCase.model_validate(case) for case in data.get("testCases") or []]
    except ValidationError as e:
        raise LLMClientError(f"Response does not match the test case schema: {str(e)}")
