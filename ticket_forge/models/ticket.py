"""
Pydantic models for drafted Jira tickets and bug reports.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ticket_forge.models.enums import TicketKind

logger = logging.getLogger(__name__)


class TicketDraft(BaseModel):
    """
    A proposed (not yet created) Jira ticket and its children.

    Drafts come from the document analysis flow or from the user, and are
    consumed once by the hierarchy orchestrator, which never mutates them.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: TicketKind = Field(..., description="Epic | Story | Task | Sub-task | Bug")
    summary: str = Field(..., min_length=1, description="Concise ticket title")
    description: Union[str, Dict[str, Any]] = Field(
        default="",
        description="Markdown-flavoured text, or an already-encoded ADF document"
    )
    acceptance_criteria: Optional[str] = Field(
        None,
        alias="acceptanceCriteria",
        description="Acceptance criteria (used for Story and Task only)"
    )
    suggested_id: Optional[str] = Field(
        None,
        alias="suggestedId",
        description="Advisory Jira-like ID for Epics and top-level tickets; Jira assigns the real key"
    )
    children: List["TicketDraft"] = Field(default_factory=list)

    @field_validator("summary")
    @classmethod
    def _strip_summary(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("summary must not be blank")
        return value

    @model_validator(mode="after")
    def _drop_sub_task_suggested_id(self) -> "TicketDraft":
        if self.type == TicketKind.SUB_TASK and self.suggested_id:
            logger.warning(f"Ignoring suggestedId {self.suggested_id!r} on Sub-task {self.summary!r}")
            self.suggested_id = None
        return self

    def count(self) -> int:
        """Number of tickets in this subtree, including this one."""
        return 1 + sum(child.count() for child in self.children)


TicketDraft.model_rebuild()


class BugDraft(BaseModel):
    """Structured bug report drafted from a free-form narrative."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str = Field(..., min_length=1, description="Bug title")
    description_markdown: str = Field(
        ...,
        alias="descriptionMarkdown",
        description="Markdown body with ## Environment / Issue Description / Steps to Reproduce / Expected Result / Actual Result sections"
    )
    identified_environment: str = Field(
        ...,
        alias="identifiedEnvironment",
        description="Environment the bug was observed in (e.g. QA, PROD)"
    )
    attachment_name: Optional[str] = Field(None, alias="attachmentName")


class GeneratedTestCase(BaseModel):
    """Manual test case drafted from a Jira issue's description and acceptance criteria."""

    model_config = ConfigDict(populate_by_name=True)

    test_case_id: str = Field(..., alias="testCaseId", description="e.g. PROJ-12-TEST-001")
    test_case_name: str = Field(..., alias="testCaseName")
    description: str = ""
    precondition: str = ""
    test_data: str = Field("", alias="testData")
    test_steps: List[str] = Field(default_factory=list, alias="testSteps")
    expected_result: str = Field(..., alias="expectedResult")
    # Filled in by the tester during execution
    actual_result: str = Field("", alias="actualResult")
    status: str = ""

    @field_validator("test_steps")
    @classmethod
    def _drop_blank_steps(cls, steps: List[str]) -> List[str]:
        return [step.strip() for step in steps if step and step.strip()]
