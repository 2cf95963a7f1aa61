# auris/lib/cors.py
from typing import Dict, Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response

ALLOWED_METHODS = "POST, OPTIONS"
PREFLIGHT_MAX_AGE = 60 * 60 * 24


def request_origin(request: Request) -> str:
    return f"{request.url.scheme}://{request.url.netloc}"


def is_origin_allowed(origin: str, own_origin: str, allowed: Iterable[str]) -> bool:
    allowed = list(allowed)
    return origin == own_origin or "*" in allowed or origin in allowed


def cors_headers(origin: Optional[str], own_origin: str, allowed: Iterable[str]) -> Dict[str, str]:
    if not origin or not is_origin_allowed(origin, own_origin, allowed):
        return {}
    return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}


def json_response(data, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    # JSONResponse sets Content-Type: application/json
    return JSONResponse(content=data, status_code=status_code, headers=headers or {})


def preflight_response(request: Request, allowed: Iterable[str]) -> Response:
    headers = cors_headers(request.headers.get("origin"), request_origin(request), allowed)
    headers.update(
        {
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": request.headers.get("access-control-request-headers") or "Content-Type",
            "Access-Control-Max-Age": str(PREFLIGHT_MAX_AGE),
        }
    )
    return Response(status_code=204, headers=headers)
