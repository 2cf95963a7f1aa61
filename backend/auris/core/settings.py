# auris/core/settings.py
import math
from dataclasses import dataclass
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MIN_SCORE = 0.5


def split_csv(value: Optional[str]) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    api_title: str = Field(default="Auris API", alias="API_TITLE")

    # Webhook (n8n). Blank disables the channel.
    webhook_url: Optional[str] = Field(default=None, alias="N8N_WEBHOOK_URL")
    contact_source: str = Field(default="auris.cat", alias="CONTACT_SOURCE")

    # Transactional email (Resend)
    resend_api_key: Optional[str] = Field(default=None, alias="RESEND_API_KEY")
    resend_api_url: str = Field(default="https://api.resend.com/emails", alias="RESEND_API_URL")
    from_email: Optional[str] = Field(default=None, alias="FROM_EMAIL")
    to_email: Optional[str] = Field(default=None, alias="TO_EMAIL")
    emergency_from_email: Optional[str] = Field(default=None, alias="EMERGENCY_FROM_EMAIL")
    emergency_to_email: Optional[str] = Field(default=None, alias="EMERGENCY_TO_EMAIL")

    # reCAPTCHA: only enforced when both keys are present
    recaptcha_secret_key: Optional[str] = Field(default=None, alias="RECAPTCHA_SECRET_KEY")
    recaptcha_site_key: Optional[str] = Field(default=None, alias="PUBLIC_RECAPTCHA_SITE_KEY")
    recaptcha_min_score: float = Field(default=DEFAULT_MIN_SCORE, alias="RECAPTCHA_MIN_SCORE")
    recaptcha_verify_url: str = Field(
        default="https://www.google.com/recaptcha/api/siteverify",
        alias="RECAPTCHA_VERIFY_URL",
    )
    recaptcha_action: str = Field(default="contact_form", alias="RECAPTCHA_ACTION")

    # Comma separated; "*" allows any origin
    contact_allowed_origins: str = Field(default="", alias="CONTACT_ALLOWED_ORIGINS")

    rate_limit_max_requests: int = Field(default=5, alias="RATE_LIMIT_MAX_REQUESTS")
    rate_limit_window_ms: int = Field(default=60_000, alias="RATE_LIMIT_WINDOW_MS")
    # Optional shared rate-limit backend; in-process map when unset
    redis_url: Optional[str] = Field(default=None, alias="REDIS_URL")

    outbound_timeout_seconds: float = Field(default=10.0, alias="OUTBOUND_TIMEOUT_SECONDS")

    @field_validator("recaptcha_min_score", mode="before")
    @classmethod
    def _lenient_min_score(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_MIN_SCORE
        try:
            score = float(v)
        except (TypeError, ValueError):
            return DEFAULT_MIN_SCORE
        if not math.isfinite(score):
            return DEFAULT_MIN_SCORE
        return score

    @property
    def allowed_origins(self) -> List[str]:
        return split_csv(self.contact_allowed_origins)

    @property
    def recipients(self) -> List[str]:
        return split_csv(self.to_email)

    @property
    def emergency_recipients(self) -> List[str]:
        return split_csv(self.emergency_to_email)

    @property
    def recaptcha_enabled(self) -> bool:
        return bool((self.recaptcha_secret_key or "").strip() and (self.recaptcha_site_key or "").strip())


@dataclass(frozen=True)
class DeliveryTargets:
    webhook: bool
    email: bool
    emergency_email: bool

    @property
    def any(self) -> bool:
        return self.webhook or self.email


def delivery_targets(cfg: Settings) -> DeliveryTargets:
    has_key = bool((cfg.resend_api_key or "").strip())
    return DeliveryTargets(
        webhook=bool((cfg.webhook_url or "").strip()),
        email=has_key and bool((cfg.from_email or "").strip()) and bool(cfg.recipients),
        emergency_email=has_key
        and bool((cfg.emergency_from_email or "").strip())
        and bool(cfg.emergency_recipients),
    )


settings = Settings()
