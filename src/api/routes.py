"""Dashboard routes: cached history, raw RPC proxy and liveness."""

import time

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from src.helpers.constants import MAX_PROXY_BODY
from src.helpers.errors import AggregationError, TransportError
from src.helpers.logging import get_logger
from src.history.aggregator import HistoryAggregator
from src.history.models import HistorySnapshot


logger = get_logger(__name__)

router = APIRouter()

STALE_HEADER = "X-History-Stale"


def _snapshot_response(
    snapshot: HistorySnapshot, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        content=snapshot.model_dump(mode="json", by_alias=True), headers=headers
    )


def _rpc_error_response(status_code: int, code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


@router.get("/history")
async def get_history(request: Request) -> Response:
    """Latest block history, falling back to the last snapshot on failure."""
    aggregator: HistoryAggregator = request.app.state.aggregator
    try:
        snapshot = await aggregator.get_snapshot()
    except AggregationError as e:
        stale = aggregator.cached_snapshot
        if stale is None:
            logger.warning("History unavailable: %s", e)
            return JSONResponse(
                status_code=503,
                content={"error": "history data temporarily unavailable"},
            )
        logger.warning("Serving stale history at tip #%s: %s", stale.tip_height, e)
        return _snapshot_response(stale, headers={STALE_HEADER: "1"})

    return _snapshot_response(snapshot)


@router.post("/rpc")
async def proxy_rpc(request: Request) -> Response:
    """Forward a raw JSON-RPC body to the node and relay its reply."""
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > MAX_PROXY_BODY:
            return _rpc_error_response(413, -32600, "Request body too large")

    try:
        reply = await request.app.state.rpc_client.forward(bytes(body))
    except TransportError as e:
        logger.warning("RPC proxy failed: %s", e)
        return _rpc_error_response(502, -32000, str(e))

    return Response(content=reply, media_type="application/json")


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    return {
        "ok": True,
        "uptime": int(time.monotonic() - request.app.state.started_at),
    }


__all__ = ["router"]
