# auris/routers/health.py
from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health_root():
    return {"status": "ok"}

@router.get("/contact")
async def health_contact(request: Request):
    cfg = request.app.state.settings
    targets = request.app.state.delivery_targets
    return {
        "ok": targets.any,
        "channels": {
            "webhook": targets.webhook,
            "email": targets.email,
            "emergency_email": targets.emergency_email,
        },
        "recaptcha": cfg.recaptcha_enabled,
        "rate_limit_backend": request.app.state.rate_limit_store.backend,
    }
