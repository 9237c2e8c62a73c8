"""
Character endpoint.

``GET /character`` fetches the configured upstream resource and returns the
upstream JSON unchanged, or ``500 {"error": ...}`` when the upstream call
fails for any reason.
"""

import asyncio
import time
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from character_gateway.config import StructuredLogger
from character_gateway.gateway.proxy import UpstreamClient
from character_gateway.models.proxy import ErrorResponse, FetchResult

logger = StructuredLogger(__name__)

router = APIRouter(tags=["character"])

# Non-standard status used only for logging; the caller is already gone.
CLIENT_CLOSED_REQUEST = 499

DISCONNECT_POLL_INTERVAL = 0.1


def get_upstream_client(request: Request) -> UpstreamClient:
    """Dependency returning the application's shared upstream client."""
    return request.app.state.upstream_client


async def _wait_for_disconnect(request: Request, interval: float) -> None:
    while not await request.is_disconnected():
        await asyncio.sleep(interval)


async def fetch_while_connected(
    request: Request,
    upstream_client: UpstreamClient,
    poll_interval: float = DISCONNECT_POLL_INTERVAL
) -> Optional[FetchResult]:
    """
    Run the upstream fetch, cancelling it if the inbound caller disconnects.

    Returns:
        The fetch result, or None when the caller went away first.
    """
    fetch_task = asyncio.ensure_future(upstream_client.fetch_resource())
    watch_task = asyncio.ensure_future(_wait_for_disconnect(request, poll_interval))

    try:
        done, _ = await asyncio.wait(
            {fetch_task, watch_task},
            return_when=asyncio.FIRST_COMPLETED
        )
        if fetch_task not in done and watch_task.exception() is not None:
            logger.warning(
                "Disconnect detection failed",
                error=str(watch_task.exception())
            )
            await asyncio.wait({fetch_task})
    finally:
        watch_task.cancel()
        if not fetch_task.done():
            fetch_task.cancel()

    if not fetch_task.done() or fetch_task.cancelled():
        # Caller disconnected; let the cancellation settle.
        await asyncio.gather(fetch_task, return_exceptions=True)
        return None

    return fetch_task.result()


@router.get(
    "/character",
    summary="Fetch the configured character",
    description="Proxies the upstream character resource and returns its JSON unchanged",
    responses={
        200: {"description": "Upstream JSON payload, passed through unchanged"},
        500: {"model": ErrorResponse, "description": "The upstream call failed"},
    }
)
async def get_character(
    request: Request,
    upstream_client: UpstreamClient = Depends(get_upstream_client)
) -> Response:
    """
    Fetch the character from the upstream API.

    Query parameters and request body are ignored.
    """
    start_time = time.perf_counter()

    result = await fetch_while_connected(request, upstream_client)

    if result is None:
        response = Response(status_code=CLIENT_CLOSED_REQUEST)
    elif result.ok:
        response = Response(
            content=result.content,
            status_code=status.HTTP_200_OK,
            media_type="application/json"
        )
    else:
        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=result.message).model_dump()
        )

    logger.log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        response_time=(time.perf_counter() - start_time) * 1000,
        client_ip=request.client.host if request.client else None
    )
    return response
