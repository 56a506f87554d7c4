"""
Jira browsing endpoints (projects and issues) and test case generation for an issue.
"""
from typing import Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel, ConfigDict, Field

from ticket_forge.api.dependencies import get_jira_client
from ticket_forge.models.ticket import GeneratedTestCase
from ticket_forge.services.jira_client import JiraClient, JiraClientError, MAX_PAGE_SIZE
from ticket_forge.services.llm_client import LLMClientError, generate_test_cases

router = APIRouter(prefix="/api/v1/jira", tags=["jira"])


@router.get("/projects")
def get_projects(jira_client: JiraClient = Depends(get_jira_client)) -> List[Dict[str, str]]:
    """
    Get list of Jira projects visible to the credentials.

    Returns:
        List of project dictionaries with 'id', 'key' and 'name'
    """
    try:
        return jira_client.get_projects()
    except JiraClientError as e:
        raise HTTPException(status_code=502, detail=f"Failed to get projects: {str(e)}")


@router.get("/issues")
def get_issues(
    project: str = Query(..., min_length=1, description="Project key or ID"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    jira_client: JiraClient = Depends(get_jira_client),
) -> Dict[str, Any]:
    """
    Get one page of a project's issues with descriptions as plain text.
    """
    try:
        return jira_client.search_issues(project, page=page, page_size=page_size)
    except JiraClientError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch issues: {str(e)}")


class IssueTestCasesResponse(BaseModel):
    """Test cases drafted for one Jira issue."""

    model_config = ConfigDict(populate_by_name=True)

    issue_key: str = Field(..., alias="issueKey")
    test_cases: List[GeneratedTestCase] = Field(default_factory=list, alias="testCases")


@router.post("/issues/{issue_key}/test-cases", response_model=IssueTestCasesResponse)
def create_test_cases(
    issue_key: str = Path(..., min_length=1, description="Jira issue key"),
    jira_client: JiraClient = Depends(get_jira_client),
) -> IssueTestCasesResponse:
    """
    Draft manual test cases from an issue's description and acceptance criteria.

    Nothing is written back to Jira.
    """
    try:
        issue = jira_client.get_issue(issue_key)
    except JiraClientError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch issue {issue_key}: {str(e)}")

    try:
        test_cases = generate_test_cases(
            issue.get("description"),
            issue.get("acceptanceCriteria"),
            issue_key=issue.get("key") or issue_key,
        )
    except LLMClientError as e:
        raise HTTPException(status_code=502, detail=f"Test case generation failed: {str(e)}")

    return IssueTestCasesResponse(issue_key=issue.get("key") or issue_key, test_cases=test_cases)
