"""
HTML dashboard - Jinja2 template rendering
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.templating import Jinja2Templates

from .routes import get_aggregator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

STATUS_COLORS = {
    "healthy": "#22c55e",
    "degraded": "#eab308",
    "unhealthy": "#ef4444",
    "Ready": "#22c55e",
    "NotReady": "#ef4444",
}
DEFAULT_COLOR = "#6b7280"


def badge_color(status: str) -> str:
    return STATUS_COLORS.get(status, DEFAULT_COLOR)


templates.env.filters["badge_color"] = badge_color


@router.get("/", response_class=HTMLResponse)
async def dashboard(request: Request) -> Response:
    try:
        health = await get_aggregator().get_cluster_health()
    except Exception as e:
        logger.exception("Dashboard rendering failed")
        return PlainTextResponse(f"Error: {e}", status_code=500)

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "health": health,
            "status": health.status.value,
            "components": health.components,
            "cluster": health.cluster,
        },
    )
