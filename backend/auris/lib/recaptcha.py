# auris/lib/recaptcha.py
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

log = logging.getLogger("uvicorn.error")

VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


@dataclass(frozen=True)
class VerificationResult:
    ok: bool
    reason: Optional[str] = None


async def verify_recaptcha(
    client: httpx.AsyncClient,
    token: str,
    secret: str,
    remote_ip: Optional[str] = None,
    min_score: float = 0.5,
    expected_action: str = "contact_form",
    verify_url: str = VERIFY_URL,
) -> VerificationResult:
    form = {"secret": secret, "response": token}
    if remote_ip:
        form["remoteip"] = remote_ip

    try:
        resp = await client.post(verify_url, data=form)
    except httpx.HTTPError as exc:
        return VerificationResult(False, f"reCAPTCHA request error ({exc.__class__.__name__})")

    if not resp.is_success:
        return VerificationResult(False, f"reCAPTCHA verification failed with status {resp.status_code}")

    try:
        data = resp.json()
    except ValueError:
        return VerificationResult(False, "reCAPTCHA response is not JSON")
    if not isinstance(data, dict):
        return VerificationResult(False, "reCAPTCHA response is not an object")

    if data.get("success") is not True:
        codes = ", ".join(data.get("error-codes") or []) or "unknown-error"
        return VerificationResult(False, f"reCAPTCHA not validated ({codes})")

    score = data.get("score")
    if isinstance(score, (int, float)) and not isinstance(score, bool) and score < min_score:
        return VerificationResult(False, f"reCAPTCHA score too low ({score})")

    action = data.get("action")
    if action and action != expected_action:
        return VerificationResult(False, f"Unexpected reCAPTCHA action ({action})")

    return VerificationResult(True)
