"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from html import escape

import httpx
from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse

from notifier_portal.core.config import get_settings
from notifier_portal.core.http import close_http_client
from notifier_portal.core.metrics import build_metrics_response, instrument_http_request
from notifier_portal.modules.notifications.router import router as notifications_router
from notifier_portal.shared.exceptions import register_exception_handlers
from notifier_portal.shared.utils import utc_now

settings = get_settings()
logger = logging.getLogger(__name__)


def _landing_page_html() -> str:
    """Build minimal landing page for root path."""
    app_name = escape(settings.app_name)
    return f"""
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{app_name}</title>
  </head>
  <body>
    <main class="container">
      <h1>{app_name}</h1>
      <p>Compose delayed Telegram and e-mail notifications, check their status or cancel them.</p>
      <div class="links">
        <a href="/portal">Open portal</a>
        <a href="/health">Health check</a>
        <a href="/ready">Readiness check</a>
        <a href="/metrics">Metrics</a>
      </div>
      <code>Notification backend: {escape(settings.api_base_url)}</code>
    </main>
  </body>
</html>
"""


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application startup and shutdown hooks."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("Starting %s against %s", settings.app_name, settings.api_base_url)

    yield

    logger.info("Shutting down %s", settings.app_name)
    await close_http_client()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.middleware("http")(instrument_http_request)

register_exception_handlers(app)

app.include_router(notifications_router)


@app.get("/", include_in_schema=False, response_class=HTMLResponse)
async def landing_page() -> HTMLResponse:
    """Root page with quick navigation links."""
    return HTMLResponse(content=_landing_page_html())


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    """Liveness probe endpoint."""
    return {"status": "ok"}


async def _is_backend_ready() -> bool:
    """Return True if the notification backend answers HTTP at all."""
    try:
        async with httpx.AsyncClient(timeout=settings.ready_timeout_seconds) as client:
            await client.get(settings.api_base_url)
        return True
    except httpx.HTTPError:
        logger.exception("Backend readiness check failed")
        return False


@app.get("/ready")
async def readiness_check() -> dict[str, str]:
    """Readiness probe endpoint with backend reachability check."""
    if not await _is_backend_ready():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification backend is not reachable",
        )
    return {
        "status": "ready",
        "backend": "ok",
        "timestamp": utc_now().isoformat(),
    }


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint(_: Request) -> Response:
    """Expose Prometheus metrics."""
    return build_metrics_response()
