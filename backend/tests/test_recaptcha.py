from urllib.parse import parse_qs

import httpx
import pytest

from auris.lib.recaptcha import VerificationResult, verify_recaptcha


def make_client(status=200, payload=None, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(parse_qs(request.content.decode()))
        return httpx.Response(status, json=payload if payload is not None else {})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_success_sends_form_fields():
    seen = []
    async with make_client(payload={"success": True, "score": 0.9, "action": "contact_form"}, seen=seen) as client:
        result = await verify_recaptcha(client, "tok", "secret", remote_ip="1.2.3.4")
    assert result == VerificationResult(True)
    assert seen == [{"secret": ["secret"], "response": ["tok"], "remoteip": ["1.2.3.4"]}]


@pytest.mark.asyncio
async def test_remoteip_is_optional():
    seen = []
    async with make_client(payload={"success": True}, seen=seen) as client:
        result = await verify_recaptcha(client, "tok", "secret")
    assert result.ok
    assert "remoteip" not in seen[0]


@pytest.mark.asyncio
async def test_unsuccessful_response_lists_error_codes():
    async with make_client(payload={"success": False, "error-codes": ["invalid-input-response"]}) as client:
        result = await verify_recaptcha(client, "tok", "secret")
    assert not result.ok
    assert "invalid-input-response" in result.reason


@pytest.mark.asyncio
async def test_http_error_status_fails():
    async with make_client(status=502) as client:
        result = await verify_recaptcha(client, "tok", "secret")
    assert not result.ok
    assert "502" in result.reason


@pytest.mark.asyncio
async def test_score_threshold():
    async with make_client(payload={"success": True, "score": 0.3}) as client:
        low = await verify_recaptcha(client, "tok", "secret", min_score=0.5)
        ok = await verify_recaptcha(client, "tok", "secret", min_score=0.3)
    assert not low.ok
    assert ok.ok


@pytest.mark.asyncio
async def test_unexpected_action_fails():
    async with make_client(payload={"success": True, "action": "login"}) as client:
        result = await verify_recaptcha(client, "tok", "secret")
    assert not result.ok
    assert "login" in result.reason


@pytest.mark.asyncio
async def test_transport_error_is_a_failed_result():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await verify_recaptcha(client, "tok", "secret")
    assert not result.ok
