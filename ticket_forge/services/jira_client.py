"""
Jira client for browsing projects and issues and creating new issues.

Rich-text fields are read back through the ADF plain-text decoder.
"""
from typing import Dict, Any, Optional, List
import math
import requests
from requests.auth import HTTPBasicAuth
import json
import urllib.parse

from ticket_forge.services.plain_text_decoder import adf_to_plain_text

MAX_PAGE_SIZE = 50


class JiraClientError(Exception):
    """Raised when Jira API calls fail."""
    pass


class JiraClient:
    """Client for Jira Cloud REST API v3."""

    def __init__(
        self,
        base_url: str,
        username: str,
        api_token: str,
        timeout: int = 90,
        acceptance_criteria_field_id: Optional[str] = None
    ):
        """
        Initialize Jira client.

        Args:
            base_url: Jira instance URL (e.g., "https://yourcompany.atlassian.net")
            username: Jira user email for authentication
            api_token: Jira API token for authentication
            timeout: Request timeout in seconds
            acceptance_criteria_field_id: Optional custom field ID holding acceptance criteria
        """
        self.jira_url = (base_url or "").rstrip("/")
        self.username = username
        self.api_token = api_token
        self.timeout = timeout
        self.acceptance_criteria_field_id = acceptance_criteria_field_id

        if not self.jira_url:
            raise JiraClientError("JIRA_BASE_URL cannot be empty")
        if not self.username:
            raise JiraClientError("JIRA_EMAIL cannot be empty")
        if not self.api_token:
            raise JiraClientError("JIRA_API_TOKEN cannot be empty")

    def _make_request(
        self,
        endpoint: str,
        method: str = "GET",
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Make authenticated request to Jira API.

        Args:
            endpoint: API endpoint (e.g., "/rest/api/3/issue/KEY-123")
            method: HTTP method (GET or POST)
            data: Optional JSON request body
            files: Optional multipart files (attachments)

        Returns:
            JSON response from Jira API

        Raises:
            JiraClientError: If request fails
        """
        url = f"{self.jira_url}{endpoint}"
        auth = HTTPBasicAuth(self.username, self.api_token)

        try:
            if method == "GET":
                response = requests.get(
                    url,
                    auth=auth,
                    headers={"Accept": "application/json"},
                    timeout=self.timeout
                )
            elif method == "POST" and files:
                # Attachments need multipart and Jira's XSRF opt-out header
                response = requests.post(
                    url,
                    auth=auth,
                    headers={"Accept": "application/json", "X-Atlassian-Token": "no-check"},
                    files=files,
                    timeout=self.timeout
                )
            elif method == "POST":
                response = requests.post(
                    url,
                    auth=auth,
                    headers={"Accept": "application/json", "Content-Type": "application/json"},
                    data=json.dumps(data) if data else None,
                    timeout=self.timeout
                )
            else:
                raise JiraClientError(f"Unsupported HTTP method: {method}")

            if not response.ok:
                raise JiraClientError(
                    f"Jira API returned {response.status_code}: {self._error_detail(response)}"
                )
            # Some responses may be empty (204 No Content)
            if response.content:
                return response.json()
            return {}
        except requests.exceptions.Timeout:
            raise JiraClientError(
                f"Jira API request timed out after {self.timeout} seconds. "
                f"Please try again or check your Jira instance status."
            )
        except requests.exceptions.RequestException as e:
            raise JiraClientError(f"Jira API request failed: {str(e)}")

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        """Pull Jira's errorMessages/errors out of an error response."""
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason or "no details"

        messages = list(body.get("errorMessages", [])) if isinstance(body, dict) else []
        field_errors = body.get("errors", {}) if isinstance(body, dict) else {}
        for field, message in field_errors.items():
            messages.append(f"{field}: {message}")
        return "; ".join(messages) or response.text

    def browse_url(self, issue_key: str) -> str:
        """Web URL of an issue."""
        return f"{self.jira_url}/browse/{issue_key}"

    def get_projects(self) -> List[Dict[str, str]]:
        """
        Get list of Jira projects visible to the credentials.

        Returns:
            List of project dictionaries with 'id', 'key' and 'name'
        """
        try:
            response = self._make_request("/rest/api/3/project")

            projects = []
            for project in response:
                projects.append({
                    "id": project.get("id", ""),
                    "key": project.get("key", ""),
                    "name": project.get("name", "")
                })

            return projects
        except JiraClientError:
            raise
        except Exception as e:
            raise JiraClientError(f"Failed to get projects: {str(e)}")

    def _map_issue(self, issue: Dict[str, Any]) -> Dict[str, Any]:
        fields = issue.get("fields", {})
        description = fields.get("description")
        acceptance_criteria = None
        if self.acceptance_criteria_field_id:
            acceptance_criteria = fields.get(self.acceptance_criteria_field_id)

        return {
            "id": issue.get("id"),
            "key": issue.get("key"),
            "summary": fields.get("summary", ""),
            "issueType": (fields.get("issuetype") or {}).get("name", "Unknown"),
            "status": (fields.get("status") or {}).get("name", "Unknown"),
            "description": adf_to_plain_text(description) if description else None,
            "acceptanceCriteria": adf_to_plain_text(acceptance_criteria) if acceptance_criteria else None,
        }

    def search_issues(self, project: str, page: int = 1, page_size: int = 10) -> Dict[str, Any]:
        """
        Fetch one page of a project's issues, newest first.

        Args:
            project: Project key or numeric ID
            page: 1-based page number
            page_size: Issues per page (1-50)

        Returns:
            Dictionary with issues, total, page, pageSize, totalPages
        """
        if page < 1:
            raise JiraClientError("page must be >= 1")
        if page_size < 1 or page_size > MAX_PAGE_SIZE:
            raise JiraClientError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

        fields = "summary,issuetype,status,description"
        if self.acceptance_criteria_field_id:
            fields += f",{self.acceptance_criteria_field_id}"
        escaped_project = project.replace("\\", "\\\\").replace('"', '\\"')
        jql = f'project = "{escaped_project}" ORDER BY created DESC'
        start_at = (page - 1) * page_size

        try:
            response = self._make_request(
                f"/rest/api/3/search?jql={urllib.parse.quote(jql)}"
                f"&startAt={start_at}&maxResults={page_size}&fields={fields}"
            )

            total = response.get("total", 0)
            return {
                "issues": [self._map_issue(issue) for issue in response.get("issues", [])],
                "total": total,
                "page": page,
                "pageSize": page_size,
                "totalPages": math.ceil(total / page_size),
            }
        except JiraClientError:
            raise
        except Exception as e:
            raise JiraClientError(f"Failed to search issues for project {project}: {str(e)}")

    def get_issue(self, issue_key: str) -> Dict[str, Any]:
        """
        Fetch a single Jira issue with its rich-text fields decoded.

        Args:
            issue_key: Jira issue key (e.g., "ABC-123")

        Returns:
            Dictionary with id, key, summary, issueType, status, description, acceptanceCriteria
        """
        fields = "summary,description,status,issuetype"
        if self.acceptance_criteria_field_id:
            fields += f",{self.acceptance_criteria_field_id}"
        try:
            issue = self._make_request(f"/rest/api/3/issue/{issue_key}?fields={fields}")
            return self._map_issue(issue)
        except JiraClientError:
            raise
        except Exception as e:
            raise JiraClientError(f"Failed to fetch issue {issue_key}: {str(e)}")

    def create_issue(
        self,
        project_key: str,
        issue_type: str,
        summary: str,
        description_adf: Optional[Dict[str, Any]] = None,
        fields: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Create a new Jira issue.

        Args:
            project_key: Jira project key (e.g., "PROJ")
            issue_type: Issue type name (e.g., "Story", "Sub-task")
            summary: Issue summary/title
            description_adf: Optional description in ADF format
            fields: Optional extra fields (parent, epic link, custom fields)

        Returns:
            Jira API response with created issue key and ID

        Raises:
            JiraClientError: If creation fails
        """
        payload_fields: Dict[str, Any] = {
            "project": {"key": project_key},
            "summary": summary,
            "issuetype": {"name": issue_type},
        }
        if description_adf:
            payload_fields["description"] = description_adf
        if fields:
            payload_fields.update(fields)

        try:
            response = self._make_request(
                "/rest/api/3/issue",
                method="POST",
                data={"fields": payload_fields}
            )
            if not response.get("key"):
                raise JiraClientError("Jira did not return a key for the created issue")
            return response
        except JiraClientError:
            raise
        except Exception as e:
            raise JiraClientError(f"Failed to create issue: {str(e)}")

    def add_attachment(self, issue_key: str, filename: str, content: bytes) -> List[Dict[str, Any]]:
        """
        Attach a file to an issue.

        Args:
            issue_key: Jira issue key
            filename: File name shown in Jira
            content: Raw file bytes

        Returns:
            Jira attachment metadata list
        """
        try:
            return self._make_request(
                f"/rest/api/3/issue/{issue_key}/attachments",
                method="POST",
                files={"file": (filename, content)}
            )
        except JiraClientError:
            raise
        except Exception as e:
            raise JiraClientError(f"Failed to attach {filename} to issue {issue_key}: {str(e)}")
