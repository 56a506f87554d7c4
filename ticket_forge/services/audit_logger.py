"""
Audit logger for Jira ticket creation.

Persists an audit trail of every create run (hierarchies and bugs).
"""
import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any
from pathlib import Path

from ticket_forge.version import __version__

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "operation",
    "project_key",
    "success",
    "created_keys",
    "message",
)


class AuditLogger:
    """Append-only JSONL audit logger for create operations."""

    def __init__(self, log_dir: str = "audit_logs"):
        """
        Initialize audit logger.

        Args:
            log_dir: Directory to store audit logs (default: "audit_logs")
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def log_event(self, event: Dict[str, Any]) -> Path:
        """
        Log an audit event to persistent storage.

        Persists:
        - operation (create_hierarchy | create_bug)
        - project_key
        - success
        - created_keys
        - failed (error lines, if any)
        - message
        - executed_at

        Args:
            event: Event dictionary with required fields

        Returns:
            Path of the log file written to

        Raises:
            ValueError: If a required field is missing
        """
        for field in REQUIRED_FIELDS:
            if field not in event:
                raise ValueError(f"Missing required audit field: {field}")

        now = datetime.now(timezone.utc)
        log_entry = {
            "timestamp": now.isoformat(),
            "version": __version__,
            "operation": event["operation"],
            "project_key": event["project_key"],
            "success": event["success"],
            "created_keys": list(event["created_keys"]),
            "failed": list(event.get("failed", [])),
            "message": event["message"],
            "executed_at": event.get("executed_at") or now.isoformat(),
        }

        # One file per day
        log_file = self.log_dir / f"audit_{now.strftime('%Y-%m-%d')}.jsonl"
        try:
            with open(log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(log_entry) + "\n")
        except OSError as e:
            # Audit write failures never fail the request
            logger.error(f"Failed to write audit log: {e}")
        return log_file
