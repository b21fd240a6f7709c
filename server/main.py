"""FastAPI web server exposing live navigation state.

Start with::

    NMEACLI_ADDR=gps.local:10110 uvicorn server.main:app --host 0.0.0.0 --port 8000

Endpoints:

* ``GET /snapshot`` - the current navigation snapshot as JSON.
* ``GET /health`` - accepted-sentence and error counters.
* ``GET /lines`` - the most recent raw sentences.
* ``WS /ws`` - one ``type="snapshot"`` message per published snapshot,
  starting with the current one.
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from functools import partial
from typing import Any

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from navstate import IngestPipeline, Settings, SnapshotStore, open_source
from server.formatters import format_health, format_snapshot, format_snapshot_message
from server.ingest import IngestWorker, SourceFactory

__all__ = ["app", "create_app"]

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_TIMEOUT_SECONDS = 5.0


async def _send_snapshots_until_disconnect(
    store: SnapshotStore,
    websocket: WebSocket,
) -> None:
    version = -1
    try:
        while True:
            update = await asyncio.to_thread(
                store.wait_for_update, version, _TIMEOUT_SECONDS
            )
            if update is None:
                await websocket.close(code=1001)
                return
            version, snapshot = update
            await websocket.send_text(format_snapshot_message(snapshot, time.time()))
    except WebSocketDisconnect:
        pass


def _log_worker_exit(future: asyncio.Future[None]) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error("Ingest worker died", exc_info=error)


def create_app(
    settings: Settings | None = None,
    source_factory: SourceFactory | None = None,
    store: SnapshotStore | None = None,
) -> FastAPI:
    """Build the application around one store and one ingest worker.

    Args:
        settings: Defaults to ``Settings.from_env()``.
        source_factory: Opens the byte source; defaults to the transport
            chosen by ``settings``.
        store: Defaults to a new ``SnapshotStore``.
    """
    if settings is None:
        settings = Settings.from_env()
    if store is None:
        store = SnapshotStore(settings.recent_lines)
    if source_factory is None:
        source_factory = partial(open_source, settings)

    @asynccontextmanager
    async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(format=_LOG_FORMAT, level=settings.log_level)
        pipeline = IngestPipeline(store, settings.max_line_length)
        worker = IngestWorker(pipeline, source_factory, settings.reconnect_delay)
        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(max_workers=1)
        future = loop.run_in_executor(executor, worker.run)
        future.add_done_callback(_log_worker_exit)
        application.state.ingest_future = future
        yield
        worker.stop()
        _, pending = await asyncio.wait({future}, timeout=_TIMEOUT_SECONDS)
        if pending:
            logger.warning("Ingest worker did not stop within %.1f s", _TIMEOUT_SECONDS)
        executor.shutdown(wait=False)

    application = FastAPI(lifespan=_lifespan)
    application.state.store = store

    @application.get("/snapshot")
    def read_snapshot() -> dict[str, Any]:
        return format_snapshot(store.current_snapshot(), time.time())

    @application.get("/health")
    def read_health() -> dict[str, Any]:
        return format_health(store.health())

    @application.get("/lines")
    def read_lines() -> dict[str, list[str]]:
        return {"lines": list(store.recent_lines())}

    @application.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        """Stream snapshot JSON messages to a connected WebSocket client.

        The first message is the current snapshot; after that one message is
        sent per published snapshot. A slow client skips intermediate
        snapshots rather than queueing them. The connection closes (code
        1001) if nothing is published within ``_TIMEOUT_SECONDS``.
        """
        await websocket.accept()
        await _send_snapshots_until_disconnect(store, websocket)

    return application


app = create_app()
