"""
Unit tests for the Jira REST client.
"""
import json
import urllib.parse
from unittest.mock import Mock, patch

import pytest
import requests

from ticket_forge.services.jira_client import JiraClient, JiraClientError


def _client(**kwargs):
    return JiraClient("https://example.atlassian.net/", "qa@example.com", "token", **kwargs)


def _response(body=None, status_code=200):
    response = Mock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.content = json.dumps(body).encode() if body is not None else b""
    response.json.return_value = body
    response.text = json.dumps(body) if body is not None else ""
    return response


ADF_DESCRIPTION = {
    "type": "doc",
    "version": 1,
    "content": [
        {"type": "paragraph", "content": [{"type": "text", "text": "Line one"}]},
        {"type": "paragraph", "content": [{"type": "text", "text": "Line two"}]},
    ],
}


@pytest.mark.parametrize("args", [
    ("", "qa@example.com", "token"),
    ("https://example.atlassian.net", "", "token"),
    ("https://example.atlassian.net", "qa@example.com", ""),
])
def test_constructor_rejects_missing_credentials(args):
    with pytest.raises(JiraClientError):
        JiraClient(*args)


def test_browse_url_strips_trailing_slash():
    assert _client().browse_url("PROJ-1") == "https://example.atlassian.net/browse/PROJ-1"


@patch("ticket_forge.services.jira_client.requests.get")
def test_get_projects(mock_get):
    mock_get.return_value = _response([
        {"id": "1", "key": "PROJ", "name": "Project", "avatarUrls": {}},
    ])

    assert _client().get_projects() == [{"id": "1", "key": "PROJ", "name": "Project"}]
    assert mock_get.call_args.args[0] == "https://example.atlassian.net/rest/api/3/project"


@patch("ticket_forge.services.jira_client.requests.get")
def test_search_issues_pages_and_decodes(mock_get):
    mock_get.return_value = _response({
        "total": 21,
        "issues": [{
            "id": "10001",
            "key": "PROJ-3",
            "fields": {
                "summary": "Export fails",
                "issuetype": {"name": "Bug"},
                "status": {"name": "To Do"},
                "description": ADF_DESCRIPTION,
                "customfield_10009": ADF_DESCRIPTION,
            },
        }],
    })

    result = _client(acceptance_criteria_field_id="customfield_10009").search_issues("PROJ", page=2, page_size=10)

    url = mock_get.call_args.args[0]
    assert "startAt=10" in url and "maxResults=10" in url
    assert "customfield_10009" in url
    assert result["total"] == 21
    assert result["totalPages"] == 3
    assert result["page"] == 2 and result["pageSize"] == 10
    issue = result["issues"][0]
    assert issue["issueType"] == "Bug"
    assert issue["status"] == "To Do"
    assert issue["description"] == "Line one\nLine two"
    assert issue["acceptanceCriteria"] == "Line one\nLine two"


@patch("ticket_forge.services.jira_client.requests.get")
def test_search_issues_quotes_project_in_jql(mock_get):
    mock_get.return_value = _response({"total": 0, "issues": []})

    _client().search_issues('PROJ OR project = "OTHER"')

    query = urllib.parse.parse_qs(urllib.parse.urlsplit(mock_get.call_args.args[0]).query)
    assert query["jql"] == ['project = "PROJ OR project = \\"OTHER\\"" ORDER BY created DESC']


@pytest.mark.parametrize("page, page_size", [(0, 10), (1, 0), (1, 51)])
def test_search_issues_validates_paging(page, page_size):
    with pytest.raises(JiraClientError):
        _client().search_issues("PROJ", page=page, page_size=page_size)


@patch("ticket_forge.services.jira_client.requests.get")
def test_get_issue_without_description(mock_get):
    mock_get.return_value = _response({"id": "1", "key": "PROJ-1", "fields": {"summary": "S", "description": None}})

    issue = _client().get_issue("PROJ-1")

    assert issue["description"] is None
    assert issue["issueType"] == "Unknown"


@patch("ticket_forge.services.jira_client.requests.post")
def test_create_issue_payload(mock_post):
    mock_post.return_value = _response({"id": "10002", "key": "PROJ-2"}, status_code=201)

    response = _client().create_issue(
        "PROJ", "Story", "Pay by card", description_adf=ADF_DESCRIPTION, fields={"parent": {"key": "PROJ-1"}}
    )

    assert response["key"] == "PROJ-2"
    payload = json.loads(mock_post.call_args.kwargs["data"])
    assert payload == {"fields": {
        "project": {"key": "PROJ"},
        "summary": "Pay by card",
        "issuetype": {"name": "Story"},
        "description": ADF_DESCRIPTION,
        "parent": {"key": "PROJ-1"},
    }}


@patch("ticket_forge.services.jira_client.requests.post")
def test_create_issue_reports_jira_errors(mock_post):
    mock_post.return_value = _response(
        {"errorMessages": ["Bad request"], "errors": {"summary": "You must specify a summary"}},
        status_code=400,
    )

    with pytest.raises(JiraClientError) as exc:
        _client().create_issue("PROJ", "Task", "x")

    assert str(exc.value) == "Jira API returned 400: Bad request; summary: You must specify a summary"


@patch("ticket_forge.services.jira_client.requests.post")
def test_create_issue_without_key_fails(mock_post):
    mock_post.return_value = _response({"id": "10002"}, status_code=201)

    with pytest.raises(JiraClientError, match="did not return a key"):
        _client().create_issue("PROJ", "Task", "x")


@patch("ticket_forge.services.jira_client.requests.get")
def test_timeout_is_reported(mock_get):
    mock_get.side_effect = requests.exceptions.Timeout()

    with pytest.raises(JiraClientError, match="timed out after 5 seconds"):
        _client(timeout=5).get_projects()


@patch("ticket_forge.services.jira_client.requests.get")
def test_connection_error_is_reported(mock_get):
    mock_get.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(JiraClientError, match="request failed: refused"):
        _client().get_projects()


@patch("ticket_forge.services.jira_client.requests.post")
def test_add_attachment_sends_multipart_with_xsrf_header(mock_post):
    mock_post.return_value = _response([{"id": "900", "filename": "shot.png"}])

    result = _client().add_attachment("PROJ-4", "shot.png", b"\x89PNG")

    assert result == [{"id": "900", "filename": "shot.png"}]
    kwargs = mock_post.call_args.kwargs
    assert kwargs["headers"]["X-Atlassian-Token"] == "no-check"
    assert kwargs["files"] == {"file": ("shot.png", b"\x89PNG")}
    assert mock_post.call_args.args[0].endswith("/rest/api/3/issue/PROJ-4/attachments")
