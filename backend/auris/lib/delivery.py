# auris/lib/delivery.py
import html
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from auris.core.settings import DeliveryTargets, Settings, delivery_targets
from auris.lib.contact_validation import ValidatedSubmission
from auris.lib.errors import DeliveryError

log = logging.getLogger("uvicorn.error")

WEBHOOK_TOKEN_HEADER = "X-AURIS-TOKEN"


def escape_html(value: str) -> str:
    # & < > " ' -> entities
    return html.escape(value, quote=True).replace("&#x27;", "&#39;")


def build_email_html(name: str, email: str, message: str) -> str:
    body = escape_html(message).replace("\n", "<br>")
    return (
        f"<p><b>Nombre:</b> {escape_html(name)}</p>\n"
        f"<p><b>Email:</b> {escape_html(email)}</p>\n"
        f"<p><b>Mensaje:</b><br>{body}</p>"
    )


def build_emergency_html(sub: ValidatedSubmission, error: str, generated_at: str) -> str:
    return (
        "<p><b>El envío principal del formulario de contacto fue rechazado.</b></p>\n"
        f"<p><b>Error:</b> {escape_html(error)}</p>\n"
        f"<p><b>Idioma:</b> {escape_html(sub.lang)}</p>\n"
        f"<p><b>Generado:</b> {escape_html(generated_at)}</p>\n"
        "<hr>\n" + build_email_html(sub.name, sub.email, sub.message)
    )


async def post_json(client: httpx.AsyncClient, channel: str, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> None:
    resp = await client.post(url, json=payload, headers=headers)
    if not resp.is_success:
        raise DeliveryError(channel, resp.status_code, detail=resp.text[:500] or None)


class DeliveryResult:
    SENT = "sent"
    UNAVAILABLE = "unavailable"  # provider blocked the primary email


class ContactDispatcher:
    def __init__(self, cfg: Settings, client: httpx.AsyncClient, targets: Optional[DeliveryTargets] = None):
        self.cfg = cfg
        self.client = client
        self.targets = targets or delivery_targets(cfg)

    def _resend_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.cfg.resend_api_key}",
            "Content-Type": "application/json",
        }

    async def send_webhook(self, sub: ValidatedSubmission) -> None:
        await post_json(
            self.client,
            "webhook",
            self.cfg.webhook_url,
            {
                "name": sub.name,
                "email": sub.email,
                "message": sub.message,
                "lang": sub.lang,
                "source": self.cfg.contact_source,
            },
            {"Content-Type": "application/json", WEBHOOK_TOKEN_HEADER: "required"},
        )

    async def send_email(self, sub: ValidatedSubmission) -> None:
        await post_json(
            self.client,
            "email",
            self.cfg.resend_api_url,
            {
                "from": self.cfg.from_email,
                "to": self.cfg.recipients,
                "reply_to": sub.email,
                "subject": f"Nuevo contacto — {self.cfg.contact_source} ({sub.lang})",
                "html": build_email_html(sub.name, sub.email, sub.message),
            },
            self._resend_headers(),
        )

    async def send_emergency_email(self, sub: ValidatedSubmission, error: str) -> bool:
        recipients: List[str] = self.cfg.emergency_recipients
        generated_at = datetime.now(timezone.utc).isoformat()
        try:
            await post_json(
                self.client,
                "emergency email",
                self.cfg.resend_api_url,
                {
                    "from": self.cfg.emergency_from_email,
                    "to": recipients,
                    "subject": f"[URGENTE] Contacto no entregado — {self.cfg.contact_source} ({sub.lang})",
                    "html": build_emergency_html(sub, error, generated_at),
                },
                self._resend_headers(),
            )
        except Exception as exc:
            log.error(f"[delivery] emergency email failed: {exc}")
            return False
        log.warning(f"[delivery] emergency email sent to {len(recipients)} recipient(s)")
        return True

    async def dispatch(self, sub: ValidatedSubmission) -> str:
        """
        Webhook first, then email. Webhook and non-403 email failures raise
        DeliveryError; a 403 on the primary email triggers the emergency path
        and reports UNAVAILABLE.
        """
        if self.targets.webhook:
            await self.send_webhook(sub)

        if self.targets.email:
            try:
                await self.send_email(sub)
            except DeliveryError as exc:
                if exc.status_code != 403:
                    raise
                log.warning(f"[delivery] primary email rejected: {exc}")
                if self.targets.emergency_email:
                    reason = f"{exc}: {exc.detail}" if exc.detail else str(exc)
                    await self.send_emergency_email(sub, reason)
                return DeliveryResult.UNAVAILABLE

        return DeliveryResult.SENT
