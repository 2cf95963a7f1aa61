# auris/lib/contact_input.py
import json
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Submission:
    name: str = ""
    email: str = ""
    message: str = ""
    website: Optional[str] = None  # honeypot
    lang: Optional[str] = None
    token: Optional[str] = None  # reCAPTCHA proof


def _str_field(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _optional_str(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def parse_submission(raw_body: Optional[bytes]) -> Submission:
    # Malformed bodies become an empty submission, never an error.
    try:
        data = json.loads(raw_body) if raw_body else None
    except Exception:
        # ValueError for bad JSON, RecursionError for deeply nested bodies
        data = None
    if not isinstance(data, dict):
        return Submission()

    return Submission(
        name=_str_field(data.get("name")),
        email=_str_field(data.get("email")),
        message=_str_field(data.get("message")),
        website=_optional_str(data.get("website")),
        lang=_optional_str(data.get("lang")),
        token=_optional_str(data.get("token")),
    )
