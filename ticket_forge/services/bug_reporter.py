"""
Creates a single drafted bug report in Jira, with an optional attachment.
"""
import base64
import binascii
import logging
from typing import Optional, Tuple

from ticket_forge.models.enums import TicketKind
from ticket_forge.models.results import BugCreationResult
from ticket_forge.models.ticket import BugDraft
from ticket_forge.services.jira_client import JiraClient, JiraClientError
from ticket_forge.services.markdown_encoder import markdown_to_adf

logger = logging.getLogger(__name__)


class AttachmentDecodeError(ValueError):
    """Raised when an attachment data URI cannot be decoded."""
    pass


def decode_data_uri(data_uri: str) -> Tuple[Optional[str], bytes]:
    """
    Decode a base64 data URI (``data:<mime>;base64,<payload>``).

    Args:
        data_uri: Data URI as produced by a browser FileReader

    Returns:
        Tuple of (MIME type or None, raw bytes)

    Raises:
        AttachmentDecodeError: If the URI is not base64-encoded data
    """
    if not data_uri.startswith("data:") or "," not in data_uri:
        raise AttachmentDecodeError("Attachment must be a data URI")

    header, payload = data_uri[5:].split(",", 1)
    if not header.endswith(";base64"):
        raise AttachmentDecodeError("Attachment data URI must be base64-encoded")

    mime_type = header[:-len(";base64")] or None
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AttachmentDecodeError(f"Invalid base64 attachment payload: {str(e)}")


def create_bug(
    client: JiraClient,
    project_key: str,
    draft: BugDraft,
    attachment_data_uri: Optional[str] = None,
    attachment_filename: Optional[str] = None
) -> BugCreationResult:
    """
    Create a Bug in Jira from a drafted report.

    The markdown description is encoded to ADF. If an attachment is given it
    is uploaded after the issue exists; an upload failure does not undo the
    bug and is reported in the message instead.

    Args:
        client: Jira client
        project_key: Target project key
        draft: Drafted bug report
        attachment_data_uri: Optional base64 data URI of a file to attach
        attachment_filename: File name for the attachment

    Returns:
        BugCreationResult with the created key and browse URL on success
    """
    description = markdown_to_adf(draft.description_markdown)
    try:
        response = client.create_issue(
            project_key=project_key,
            issue_type=TicketKind.BUG.value,
            summary=draft.summary,
            description_adf=description.to_adf() if description else None,
        )
    except JiraClientError as e:
        logger.error(f"Failed to create bug in {project_key}: {str(e)}")
        return BugCreationResult(success=False, message=f"Failed to create bug: {str(e)}")

    ticket_key = response["key"]
    ticket_url = client.browse_url(ticket_key)
    message = f"Bug {ticket_key} created successfully."

    if attachment_data_uri:
        filename = attachment_filename or draft.attachment_name or "attachment"
        try:
            _, content = decode_data_uri(attachment_data_uri)
            client.add_attachment(ticket_key, filename, content)
            message = f"Bug {ticket_key} created successfully with attachment {filename}."
        except (AttachmentDecodeError, JiraClientError) as e:
            logger.warning(f"Bug {ticket_key} created but attachment {filename} failed: {str(e)}")
            message = f"Bug {ticket_key} created, but attaching {filename} failed: {str(e)}"

    logger.info(f"Created bug {ticket_key} in {project_key}")
    return BugCreationResult(success=True, message=message, ticket_key=ticket_key, ticket_url=ticket_url)
