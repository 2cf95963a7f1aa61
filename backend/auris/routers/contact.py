# auris/routers/contact.py
import logging

import httpx
from fastapi import APIRouter, Request

from auris.core.i18n import DEFAULT_LANG, normalize_lang, t
from auris.core.rate_limit import get_client_ip
from auris.core.settings import Settings
from auris.lib.contact_input import parse_submission
from auris.lib.contact_validation import is_honeypot, validate_submission
from auris.lib.cors import cors_headers, json_response, preflight_response, request_origin
from auris.lib.delivery import ContactDispatcher, DeliveryResult
from auris.lib.errors import ContactError
from auris.lib.recaptcha import verify_recaptcha

router = APIRouter(prefix="/api", tags=["contact"])
log = logging.getLogger("uvicorn.error")


def _outbound_client(request: Request, cfg: Settings) -> httpx.AsyncClient:
    # Tests swap the transport through app.state
    return httpx.AsyncClient(
        timeout=cfg.outbound_timeout_seconds,
        transport=getattr(request.app.state, "http_transport", None),
    )


async def _check_recaptcha(client: httpx.AsyncClient, cfg: Settings, token, client_ip, lang: str) -> None:
    if not token:
        raise ContactError(400, t(lang, "contact.security_required"))
    result = await verify_recaptcha(
        client,
        token,
        cfg.recaptcha_secret_key,
        remote_ip=client_ip,
        min_score=cfg.recaptcha_min_score,
        expected_action=cfg.recaptcha_action,
        verify_url=cfg.recaptcha_verify_url,
    )
    if not result.ok:
        log.warning(f"[recaptcha] rejected contact submission: {result.reason}")
        raise ContactError(400, t(lang, "contact.security_failed"))


@router.options("/contact")
async def contact_preflight(request: Request):
    cfg: Settings = request.app.state.settings
    return preflight_response(request, cfg.allowed_origins)


@router.post("/contact")
async def submit_contact(request: Request):
    cfg: Settings = request.app.state.settings
    store = request.app.state.rate_limit_store
    headers = cors_headers(request.headers.get("origin"), request_origin(request), cfg.allowed_origins)
    lang = DEFAULT_LANG

    try:
        submission = parse_submission(await request.body())
        lang = normalize_lang(submission.lang)

        client_ip = get_client_ip(request.headers, request.client.host if request.client else None)
        if client_ip and not store.hit(client_ip):
            log.info(f"[contact] rate limit exceeded for {client_ip}")
            raise ContactError(429, t(lang, "contact.rate_limited"))

        if is_honeypot(submission):
            return json_response({"ok": True}, 200, headers)

        validated = validate_submission(submission)

        if not request.app.state.delivery_targets.any:
            log.warning("[contact] no webhook or email channel configured; contact form disabled")
            raise ContactError(503, t(lang, "contact.disabled"))

        async with _outbound_client(request, cfg) as client:
            if cfg.recaptcha_enabled:
                await _check_recaptcha(client, cfg, submission.token, client_ip, lang)

            outcome = await ContactDispatcher(cfg, client, request.app.state.delivery_targets).dispatch(validated)

        if outcome == DeliveryResult.UNAVAILABLE:
            return json_response({"error": t(lang, "contact.unavailable")}, 503, headers)
        return json_response({"ok": True}, 200, headers)

    except ContactError as exc:
        return json_response({"error": exc.message}, exc.status_code, headers)
    except Exception as exc:
        log.exception(f"[contact] submission failed: {exc}")
        return json_response({"error": str(exc) or t(lang, "contact.unexpected")}, 500, headers)
