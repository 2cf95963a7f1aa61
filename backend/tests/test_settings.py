import pytest

from auris.core.settings import DeliveryTargets, Settings, delivery_targets


def _settings(**kw):
    return Settings(_env_file=None, **kw)


def test_nothing_configured_disables_every_channel():
    targets = delivery_targets(_settings(N8N_WEBHOOK_URL="", RESEND_API_KEY="", FROM_EMAIL="", TO_EMAIL=""))
    assert targets == DeliveryTargets(webhook=False, email=False, emergency_email=False)
    assert not targets.any


def test_email_needs_key_sender_and_recipient():
    full = dict(RESEND_API_KEY="re_x", FROM_EMAIL="web@auris.cat", TO_EMAIL="hola@auris.cat")
    assert delivery_targets(_settings(N8N_WEBHOOK_URL="", **full)).email
    for missing in full:
        cfg = dict(full, **{missing: " "})
        assert not delivery_targets(_settings(N8N_WEBHOOK_URL="", **cfg)).email


def test_emergency_needs_its_own_sender_and_recipients():
    cfg = _settings(RESEND_API_KEY="re_x", EMERGENCY_FROM_EMAIL="alertas@auris.cat", EMERGENCY_TO_EMAIL=",,")
    assert not delivery_targets(cfg).emergency_email
    cfg = _settings(RESEND_API_KEY="re_x", EMERGENCY_FROM_EMAIL="alertas@auris.cat", EMERGENCY_TO_EMAIL="a@auris.cat")
    assert delivery_targets(cfg).emergency_email


def test_recipient_and_origin_lists_are_split():
    cfg = _settings(TO_EMAIL=" a@auris.cat ,b@auris.cat,", CONTACT_ALLOWED_ORIGINS="https://auris.cat, https://www.auris.cat")
    assert cfg.recipients == ["a@auris.cat", "b@auris.cat"]
    assert cfg.allowed_origins == ["https://auris.cat", "https://www.auris.cat"]


@pytest.mark.parametrize("raw, expected", [("0.7", 0.7), ("", 0.5), ("abc", 0.5), ("nan", 0.5), (None, 0.5)])
def test_min_score_falls_back_to_default(raw, expected):
    assert _settings(RECAPTCHA_MIN_SCORE=raw).recaptcha_min_score == expected


def test_recaptcha_requires_both_keys():
    assert not _settings(RECAPTCHA_SECRET_KEY="s", PUBLIC_RECAPTCHA_SITE_KEY="").recaptcha_enabled
    assert _settings(RECAPTCHA_SECRET_KEY="s", PUBLIC_RECAPTCHA_SITE_KEY="p").recaptcha_enabled
