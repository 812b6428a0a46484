# core/collaborators.py
"""
Interfaces of the external services the workflows call after a state
transition, plus the default implementations used when nothing else is
wired in.
"""
from typing import Any, Protocol

from core.logging import get_logger

logger = get_logger("collaborators")


class NotificationSender(Protocol):
    async def send(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        cc: str | None = None,
    ) -> bool:
        ...


class DocumentRenderer(Protocol):
    async def render(
        self,
        template_kind: str,
        record: dict[str, Any],
        related_asset: dict[str, Any] | None,
    ) -> str:
        """Render a document and return a reference to it (URL, path, id)."""
        ...


class LoggingNotificationSender:
    """Writes outgoing messages to the log instead of a mail server."""

    async def send(self, to, subject, html_body, text_body, cc=None) -> bool:
        logger.info(
            "notification_logged",
            extra={"to": to, "cc": cc, "subject": subject},
        )
        return True


class LoggingDocumentRenderer:
    """Returns a synthetic reference; no file is produced."""

    async def render(self, template_kind, record, related_asset) -> str:
        key = (
            record.get("form_id")
            or record.get("disposal_id")
            or record.get("asset_tag", "")
        )
        reference = f"{template_kind}/{key}"
        logger.info("document_logged", extra={"template_kind": template_kind, "reference": reference})
        return reference
