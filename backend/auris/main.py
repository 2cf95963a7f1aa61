# auris/main.py
import logging
from typing import Optional

import httpx
from fastapi import FastAPI

from auris.core.rate_limit import build_rate_limit_store
from auris.core.settings import Settings, delivery_targets, settings as default_settings
from auris.routers.contact import router as contact_router
from auris.routers.health import router as health_router

log = logging.getLogger("uvicorn.error")


def create_app(
    settings: Optional[Settings] = None,
    rate_limit_store=None,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    cfg = settings or default_settings
    app = FastAPI(title=cfg.api_title)

    # Request-independent state, built once
    app.state.settings = cfg
    app.state.rate_limit_store = rate_limit_store or build_rate_limit_store(cfg)
    app.state.http_transport = http_transport
    app.state.delivery_targets = targets = delivery_targets(cfg)

    log.info(
        f"[main] contact channels webhook={targets.webhook} email={targets.email} "
        f"emergency={targets.emergency_email} recaptcha={cfg.recaptcha_enabled} "
        f"rate_limit={app.state.rate_limit_store.backend}"
    )

    # Routers
    app.include_router(contact_router)
    app.include_router(health_router)

    return app


app = create_app()
