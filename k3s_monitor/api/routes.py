"""
Health API routes

JSON endpoints wrap their payload in the ``{success, data, timestamp}``
envelope; errors use ``{success: false, error, timestamp}``.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel

from ..collectors.aggregator import HealthAggregator
from ..collectors.models import ApiResponse
from ..utils.errors import ComponentNotFoundError
from ..utils.parsers import format_timestamp

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

_aggregator: Optional[HealthAggregator] = None


def init_router(aggregator: HealthAggregator) -> None:
    global _aggregator
    _aggregator = aggregator


def get_aggregator() -> HealthAggregator:
    if _aggregator is None:
        raise RuntimeError("Health routes used before init_router()")
    return _aggregator


def _jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(data, (list, tuple)):
        return [_jsonable(item) for item in data]
    return data


def envelope(data: Any, status_code: int = 200) -> JSONResponse:
    response = ApiResponse[Any](success=True, data=_jsonable(data), timestamp=format_timestamp())
    return JSONResponse(response.to_json_dict(), status_code=status_code)


def error_envelope(error: str, status_code: int) -> JSONResponse:
    response = ApiResponse[Any](success=False, error=error, timestamp=format_timestamp())
    return JSONResponse(response.to_json_dict(), status_code=status_code)


async def _component_response(name: str) -> JSONResponse:
    aggregator = get_aggregator()
    health = await aggregator.check_component_by_name(name)
    if health is None:
        error = ComponentNotFoundError(name, aggregator.get_component_names())
        logger.info("Unknown component requested: %s", error.to_dict())
        return error_envelope(error.message, 404)
    return envelope(health)


@router.get("/api/health")
async def cluster_health(component: Optional[str] = Query(default=None)) -> JSONResponse:
    """Full cluster health, or one component with ?component=<name>"""
    if component and component != "health":
        return await _component_response(component)
    health = await get_aggregator().get_cluster_health()
    return envelope(health)


@router.get("/api/health/{component}")
async def component_health(component: str) -> JSONResponse:
    return await _component_response(component)


@router.get("/api/nodes")
async def nodes() -> JSONResponse:
    return envelope(await get_aggregator().get_nodes())


@router.get("/api/components")
async def component_names() -> JSONResponse:
    return envelope(get_aggregator().get_component_names())


@router.get("/health", response_class=PlainTextResponse)
async def liveness() -> str:
    return "OK"


@router.get("/favicon.ico", include_in_schema=False)
async def favicon() -> Response:
    return Response(status_code=204)
