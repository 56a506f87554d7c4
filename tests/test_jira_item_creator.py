"""
Unit tests for creating draft tickets through the Jira client.
"""
from unittest.mock import Mock

import pytest

from ticket_forge.models.adf import AdfValidationError
from ticket_forge.models.enums import TicketKind
from ticket_forge.services.jira_client import JiraClient, JiraClientError
from ticket_forge.services.jira_item_creator import JiraItemCreator, build_description


def _client():
    client = Mock(spec=JiraClient)
    client.create_issue.return_value = {"id": "10001", "key": "PROJ-7", "self": "https://example/rest/api/3/issue/10001"}
    return client


def _sent(client):
    return client.create_issue.call_args.kwargs


def test_returns_created_key_and_id():
    client = _client()

    created = JiraItemCreator(client, "PROJ")(TicketKind.STORY, "Story", "Body")

    assert created.key == "PROJ-7"
    assert created.id == "10001"
    sent = _sent(client)
    assert sent["project_key"] == "PROJ"
    assert sent["issue_type"] == "Story"
    assert sent["description_adf"]["content"][0]["content"][0]["text"] == "Body"


def test_sub_task_links_parent():
    client = _client()

    JiraItemCreator(client, "PROJ")(TicketKind.SUB_TASK, "Sub", "", parent_key="PROJ-2", epic_key="PROJ-1")

    assert _sent(client)["fields"] == {"parent": {"key": "PROJ-2"}}
    assert _sent(client)["description_adf"] is None


def test_sub_task_without_parent_is_rejected():
    with pytest.raises(JiraClientError):
        JiraItemCreator(_client(), "PROJ")(TicketKind.SUB_TASK, "Sub", "")


def test_epic_child_uses_parent_field_by_default():
    client = _client()

    JiraItemCreator(client, "PROJ")(TicketKind.STORY, "Story", "", epic_key="PROJ-1")

    assert _sent(client)["fields"] == {"parent": {"key": "PROJ-1"}}


def test_epic_child_uses_epic_link_field_when_configured():
    client = _client()

    JiraItemCreator(client, "PROJ", epic_link_field_id="customfield_10014")(
        TicketKind.TASK, "Task", "", epic_key="PROJ-1"
    )

    assert _sent(client)["fields"] == {"customfield_10014": "PROJ-1"}


def test_epic_name_field_gets_summary():
    client = _client()

    JiraItemCreator(client, "PROJ", epic_name_field_id="customfield_10011")(TicketKind.EPIC, "Checkout", "")

    assert _sent(client)["fields"] == {"customfield_10011": "Checkout"}


def test_acceptance_criteria_field_receives_adf():
    client = _client()

    JiraItemCreator(client, "PROJ", acceptance_criteria_field_id="customfield_10009")(
        TicketKind.STORY, "Story", "Body", acceptance_criteria="- Works\n- Fast"
    )

    criteria = _sent(client)["fields"]["customfield_10009"]
    assert criteria["type"] == "doc"
    assert criteria["content"][0]["type"] == "bulletList"
    assert len(criteria["content"][0]["content"]) == 2


def test_acceptance_criteria_appended_to_description_without_field():
    client = _client()

    JiraItemCreator(client, "PROJ")(TicketKind.STORY, "Story", "Body", acceptance_criteria="1. Works")

    content = _sent(client)["description_adf"]["content"]
    assert [block["type"] for block in content] == ["paragraph", "heading", "orderedList"]
    assert content[1]["content"][0]["text"] == "Acceptance Criteria"


def test_pre_encoded_description_is_validated():
    adf = {"type": "doc", "version": 1, "content": [{"type": "paragraph", "content": [{"type": "text", "text": "Hi"}]}]}

    assert build_description(adf).to_adf() == adf
    with pytest.raises(AdfValidationError):
        build_description({"type": "doc", "version": 1, "content": [{"type": "mediaSingle"}]})


def test_criteria_only_description():
    document = build_description("", "- only criteria")

    assert [block.type for block in document.content] == ["heading", "bulletList"]


def test_jira_errors_propagate_to_orchestrator():
    client = _client()
    client.create_issue.side_effect = JiraClientError("Jira API returned 400: summary: required")

    with pytest.raises(JiraClientError):
        JiraItemCreator(client, "PROJ")(TicketKind.TASK, "Task", "")
