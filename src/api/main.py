"""CKB dashboard server.

Serves derived block history and proxies raw JSON-RPC calls to the node so a
browser only needs to reach a single origin.

Usage:
    python -m src.api.main
"""

import time

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes import router
from src.helpers.config import get_node_rpc_url, get_server_address
from src.helpers.logging import get_logger
from src.helpers.rpc import RPCClient
from src.history.aggregator import HistoryAggregator


logger = get_logger(__name__)


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log method, path, status and elapsed time for every request."""
    start_time = time.perf_counter()
    response = await call_next(request)
    logger.debug(
        "%s %s -> %s (%.3fs)",
        request.method,
        request.url.path,
        response.status_code,
        time.perf_counter() - start_time,
    )
    return response


def create_app(
    rpc_client: RPCClient | None = None,
    aggregator: HistoryAggregator | None = None,
) -> FastAPI:
    """Build the dashboard application.

    Args:
        rpc_client: Node client; built from environment config when omitted
        aggregator: History aggregator; built around rpc_client when omitted

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        rpc = rpc_client or RPCClient(get_node_rpc_url())
        history = aggregator or HistoryAggregator(rpc)

        app.state.rpc_client = rpc
        app.state.aggregator = history
        app.state.started_at = time.monotonic()

        logger.info("Proxying /rpc -> %s", rpc.rpc_url)
        history.warm_up()
        try:
            yield
        finally:
            await history.aclose()
            if rpc_client is None:
                await rpc.aclose()

    app = FastAPI(
        title="CKB Dashboard",
        description="Block history and RPC proxy for a CKB node",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.middleware("http")(log_requests)
    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    """Main entry point."""
    import uvicorn

    host, port = get_server_address()
    logger.info("CKB dashboard running at http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
