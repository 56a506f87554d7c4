"""
Prompts for the ticket planning and bug drafting flows.
"""
from typing import Optional


def get_planner_system_prompt() -> str:
    """System prompt for breaking a requirements document into Jira tickets."""
    return """You are an expert Jira project planner.

Your task is to analyze a requirements document and break it down into a
structured hierarchy of Jira tickets: Epics, Stories, Tasks, and Sub-tasks.

Rules:
- Epics are major features or themes. Each Epic has a clear summary and a
  description explaining its overall goal.
- Stories are user-centric ("As a [user role], I want [feature] so that
  [benefit]"). Tasks are work that is not necessarily user-facing.
- Sub-tasks are small, actionable steps that complete a Story or Task.
- Descriptions may use "## " headings, "1. " numbered lists and "- " bullet
  lists, one item per line. No other Markdown.
- Put acceptance criteria for Stories and Tasks in "acceptanceCriteria",
  not in the description.
- Never invent work the document does not mention or clearly imply. If the
  document is vague, state your assumptions in the description.
"""


def get_document_analysis_prompt(
    document_text: str,
    project_key: str,
    project_name: str,
    user_persona: Optional[str] = None,
    output_format_preference: Optional[str] = None
) -> str:
    """
    Build the user prompt for document analysis.

    Args:
        document_text: Extracted text of the requirements document
        project_key: Jira project key (used for suggested IDs)
        project_name: Jira project name
        user_persona: Optional target user persona
        output_format_preference: Optional free-text output preference

    Returns:
        Prompt string
    """
    context_lines = [
        f"- Project Name: {project_name}",
        f"- Project Key: {project_key}",
    ]
    if user_persona:
        context_lines.append(f"- Target User Persona: {user_persona}")
    if output_format_preference:
        context_lines.append(f"- User Output Preference: {output_format_preference}")
    project_context = "\n".join(context_lines)

    return f"""Analyze the following requirements document for the project "{project_name}" (key: {project_key}) and produce the Jira ticket hierarchy.

Document Content:
{document_text}

Project Context:
{project_context}

Ticket fields:
- "type": one of "Epic", "Story", "Task", "Sub-task".
- "summary": concise and descriptive; unique for Epics and top-level Stories/Tasks.
- "description": detailed description derived from the document.
- "acceptanceCriteria": (optional) for Stories and Tasks only.
- "suggestedId": (optional) for Epics and top-level Stories/Tasks only, using the
  project key (e.g. "{project_key}-1"). Never on Sub-tasks. Jira assigns the real ID.
- "children": Stories/Tasks under an Epic, Sub-tasks under a Story/Task.

Respond with valid JSON of exactly this shape:
{{
    "tickets": [
        {{
            "type": "Epic",
            "summary": "User Authentication System",
            "description": "Implement a complete user authentication and authorization system.",
            "suggestedId": "{project_key}-100",
            "children": [
                {{
                    "type": "Story",
                    "summary": "As a user, I want to register for a new account",
                    "description": "Users create an account with their email and a password.",
                    "acceptanceCriteria": "1. User provides a valid email.\\n2. Password meets complexity requirements.",
                    "children": [
                        {{"type": "Sub-task", "summary": "Design registration UI", "description": "Create wireframes for the registration page."}}
                    ]
                }}
            ]
        }}
    ]
}}

Be thorough: capture every distinct piece of work mentioned or implied in the document."""


def get_bug_system_prompt() -> str:
    """System prompt for drafting a Jira bug report."""
    return """You are an expert Jira bug reporter.

You turn free-form descriptions of defects into well-structured Jira bug
reports. You extract steps to reproduce, the actual result and the expected
result from what the user wrote, inferring logical steps when they are not
explicit, and you never invent symptoms the user did not describe.
"""


def get_bug_draft_prompt(
    actual_behaviour: str,
    expected_behaviour: str,
    project_key: str,
    environment_hint: Optional[str] = None,
    attachment_filename: Optional[str] = None
) -> str:
    """
    Build the user prompt for bug drafting.

    Args:
        actual_behaviour: What the user observed
        expected_behaviour: What the user expected
        project_key: Jira project key
        environment_hint: Optional environment selected by the user
        attachment_filename: Optional name of a file the user will attach

    Returns:
        Prompt string
    """
    attachment_line = f"Attachment: {attachment_filename}\n" if attachment_filename else ""
    attachment_section = (
        f"\n   - ## Attachment(s): list the attachment as \"- {attachment_filename}\"."
        if attachment_filename else ""
    )
    attachment_field = (
        f'\n    "attachmentName": "{attachment_filename}",' if attachment_filename else ""
    )

    return f"""Draft a Jira bug report for project {project_key}.

Actual behaviour reported by the user:
{actual_behaviour}

Expected behaviour reported by the user:
{expected_behaviour}

User's Environment Hint: {environment_hint or "None provided"}
{attachment_line}
Instructions:
1. Summary: a brief title (max 15 words) stating the core problem.
2. Environment: use an environment explicitly mentioned in the description
   (e.g. "Production", "QA", "Staging", "Dev"). Otherwise use the hint.
   If neither is available use "QA". Put it in "identifiedEnvironment".
3. "descriptionMarkdown" must contain these sections in this order, each
   starting with a level 2 heading ("## "):
   - ## Environment
   - ## Issue Description
   - ## Steps to Reproduce (numbered list "1. ", one step per line; if no steps
     can be determined write "Steps to reproduce were not clear from the description.")
   - ## Expected Result
   - ## Actual Result{attachment_section}

Respond with valid JSON of exactly this shape:
{{
    "summary": "<title>",
    "descriptionMarkdown": "## Environment\\nEnvironment: QA\\n\\n## Issue Description\\n...",{attachment_field}
    "identifiedEnvironment": "<environment>"
}}"""


def get_test_case_system_prompt() -> str:
    """System prompt for generating manual test cases from a Jira issue."""
    return """You are an expert QA engineer writing manual test cases for Jira tickets.

You derive test cases only from the ticket's description and acceptance
criteria. Cover every acceptance criterion with at least one positive test,
and add negative and boundary tests where the ticket implies validation or
limits. Steps must be concrete actions a tester can follow, never generic
placeholders such as "verify the operation completes successfully".
"""


def get_test_case_prompt(
    description: str,
    acceptance_criteria: Optional[str] = None,
    issue_key: Optional[str] = None
) -> str:
    """
    Build the user prompt for test case generation.

    Args:
        description: Plain-text ticket description
        acceptance_criteria: Optional plain-text acceptance criteria
        issue_key: Optional Jira issue key used to prefix test case IDs

    Returns:
        Prompt string
    """
    id_prefix = f"{issue_key}-TEST" if issue_key else "TEST"

    return f"""Generate as many comprehensive test cases as the ticket supports.

Description:
{description or "None provided"}

Acceptance Criteria:
{acceptance_criteria or "None provided"}

Each test case has:
- "testCaseId": unique, sequential ID ("{id_prefix}-001", "{id_prefix}-002", ...)
- "testCaseName": concise name stating the action and expected result
- "description": one-sentence summary of the test goal
- "precondition": state or setup required before the steps
- "testData": values or inputs to use ("N/A" if none)
- "testSteps": ordered list of steps, one action per entry
- "expectedResult": what should happen when the steps are executed
- "actualResult": leave as ""
- "status": leave as ""

Respond with valid JSON of exactly this shape:
{{
    "testCases": [
        {{
            "testCaseId": "{id_prefix}-001",
            "testCaseName": "Registration succeeds with a valid email",
            "description": "Verify a new user can register with a valid email and password.",
            "precondition": "User is on the registration page.",
            "testData": "email: new.user@example.com, password: Str0ng!Pass",
            "testSteps": ["Enter the email", "Enter the password", "Click Register"],
            "expectedResult": "The account is created and a confirmation message is shown.",
            "actualResult": "",
            "status": ""
        }}
    ]
}}"""
