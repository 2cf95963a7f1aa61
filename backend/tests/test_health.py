# backend/tests/test_health.py
from fastapi.testclient import TestClient

from auris.core.rate_limit import InMemoryRateLimitStore
from auris.core.settings import Settings
from auris.main import create_app


def _client(**cfg):
    app = create_app(settings=Settings(_env_file=None, **cfg), rate_limit_store=InMemoryRateLimitStore())
    return TestClient(app)


def test_health():
    """Basic health endpoint returns status ok."""
    resp = _client().get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_health_contact_reports_channels_without_secrets():
    client = _client(
        N8N_WEBHOOK_URL="https://n8n.example.com/webhook/auris?token=s3cret",
        RESEND_API_KEY="re_secret",
        FROM_EMAIL="",
        RECAPTCHA_SECRET_KEY="",
    )
    resp = client.get("/health/contact")

    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is True
    assert data["channels"] == {"webhook": True, "email": False, "emergency_email": False}
    assert data["recaptcha"] is False
    assert data["rate_limit_backend"] == "memory"
    assert "s3cret" not in resp.text and "re_secret" not in resp.text
