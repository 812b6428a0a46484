# core/side_effects.py
"""
Best-effort notifications and document rendering.

Nothing here raises: a failure is logged and reported as a falsy return
value, so a committed workflow transition is never reversed by it.
"""
from typing import Any

from core.collaborators import DocumentRenderer, NotificationSender
from core.logging import get_logger
from core.notifications import Message
from store.app_settings import AppSettingsStore

logger = get_logger("side_effects")


class SideEffects:
    def __init__(
        self,
        notifier: NotificationSender,
        renderer: DocumentRenderer,
        app_settings: AppSettingsStore,
    ):
        self.notifier = notifier
        self.renderer = renderer
        self.app_settings = app_settings

    async def notify(self, purpose: str, message: Message) -> bool:
        if not message.to:
            logger.warning("notification_skipped_no_recipient", extra={"purpose": purpose})
            return False
        try:
            if not await self.app_settings.notifications_enabled():
                logger.info("notification_disabled", extra={"purpose": purpose})
                return False
            sent = await self.notifier.send(
                message.to,
                message.subject,
                message.html_body,
                message.text_body,
                cc=message.cc,
            )
        except Exception:
            logger.exception("notification_failed", extra={"purpose": purpose, "to": message.to})
            return False
        if not sent:
            logger.warning("notification_rejected", extra={"purpose": purpose, "to": message.to})
        return bool(sent)

    async def render(
        self,
        template_kind: str,
        record: dict[str, Any],
        asset: dict[str, Any] | None,
    ) -> str | None:
        try:
            if not await self.app_settings.documents_enabled():
                logger.info("document_generation_disabled", extra={"template_kind": template_kind})
                return None
            reference = await self.renderer.render(template_kind, record, asset)
        except Exception:
            logger.exception("document_generation_failed", extra={"template_kind": template_kind})
            return None
        return reference or None
