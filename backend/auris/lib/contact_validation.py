# auris/lib/contact_validation.py
import re
from dataclasses import dataclass

from auris.core.i18n import normalize_lang, t
from auris.lib.contact_input import Submission
from auris.lib.errors import ContactError

NAME_MIN, NAME_MAX = 2, 200
EMAIL_MAX = 254
MESSAGE_MIN, MESSAGE_MAX = 10, 5000

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

FORBIDDEN_CONTENT_PATTERNS = (
    re.compile(r"(https?://|ftp://|www\.)", re.IGNORECASE),
    re.compile(r"\.{1,2}[\\/]"),
    re.compile(r"(^|\s)[A-Za-z]:\\"),
    re.compile(r"(^|[\s@])[A-Za-z0-9._-]{2,}[\\/][A-Za-z0-9._-]{2,}"),
)


@dataclass(frozen=True)
class ValidatedSubmission:
    name: str
    email: str
    message: str
    lang: str


def contains_forbidden_content(value: str) -> bool:
    return any(p.search(value) for p in FORBIDDEN_CONTENT_PATTERNS)


def is_honeypot(submission: Submission) -> bool:
    return bool(submission.website)


def validate_submission(submission: Submission) -> ValidatedSubmission:
    """
    Checks fields in a fixed order and raises ContactError(400) on the first
    violation. Honeypot handling is the caller's job (see is_honeypot).
    """
    lang = normalize_lang(submission.lang)
    name = submission.name.strip()
    email = submission.email.strip()
    message = submission.message.strip()

    if not name or not email or not message:
        raise ContactError(400, t(lang, "contact.missing_fields"))
    if not NAME_MIN <= len(name) <= NAME_MAX:
        raise ContactError(400, t(lang, "contact.invalid_name"))
    if len(email) > EMAIL_MAX or not EMAIL_PATTERN.match(email):
        raise ContactError(400, t(lang, "contact.invalid_email"))
    if not MESSAGE_MIN <= len(message) <= MESSAGE_MAX:
        raise ContactError(400, t(lang, "contact.invalid_message"))
    if contains_forbidden_content(name) or contains_forbidden_content(message):
        raise ContactError(400, t(lang, "contact.invalid_content"))

    return ValidatedSubmission(name=name, email=email, message=message, lang=lang)
