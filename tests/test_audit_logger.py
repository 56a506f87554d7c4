"""
Unit tests for the JSONL audit trail and settings helpers.
"""
import json

import pytest

from ticket_forge.config import Settings
from ticket_forge.services.audit_logger import AuditLogger
from ticket_forge.version import __version__


def test_log_event_appends_jsonl(tmp_path):
    audit = AuditLogger(str(tmp_path / "audit"))
    event = {
        "operation": "create_hierarchy",
        "project_key": "PROJ",
        "success": False,
        "created_keys": ["PROJ-1"],
        "failed": ['Story "Pay": Jira API returned 400'],
        "message": "Created 1 ticket(s), but 1 failed",
    }

    first = audit.log_event(event)
    second = audit.log_event(event)

    assert first == second
    lines = first.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    entry = json.loads(lines[0])
    assert entry["version"] == __version__
    assert entry["created_keys"] == ["PROJ-1"]
    assert entry["failed"] == ['Story "Pay": Jira API returned 400']
    assert entry["executed_at"]


def test_log_event_requires_fields(tmp_path):
    with pytest.raises(ValueError, match="created_keys"):
        AuditLogger(str(tmp_path)).log_event({
            "operation": "create_bug",
            "project_key": "PROJ",
            "success": True,
            "message": "ok",
        })


def test_require_jira_credentials():
    settings = Settings(jira_base_url="https://example.atlassian.net", jira_email=None, jira_api_token="t")

    with pytest.raises(ValueError, match="JIRA_EMAIL"):
        settings.require_jira_credentials()


def test_extra_cors_origins_are_split():
    settings = Settings(cors_allowed_origins=" https://a.example , ,https://b.example")

    assert settings.extra_cors_origins() == ["https://a.example", "https://b.example"]
