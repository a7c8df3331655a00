"""Dependency injection factory."""

import asyncio
import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI

from orgflow.config import Config
from orgflow.store import DocumentStore
from orgflow.watcher import DocumentWatcher
from orgflow.websocket.connection_manager import ConnectionManager

logger = logging.getLogger(__name__)

# Global instances for dependency injection
_config: Config | None = None
_store: DocumentStore | None = None
_connection_manager: ConnectionManager | None = None
_watcher: DocumentWatcher | None = None


def get_config() -> Config:
    """Get or create Config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_document_store() -> DocumentStore:
    """Get or create the DocumentStore singleton (loaded on creation)."""
    global _store
    if _store is None:
        config = get_config()
        _store = DocumentStore(config.document_path(), strict=config.strict_load)
        _store.reload()
    return _store


def get_connection_manager() -> ConnectionManager:
    """Get or create ConnectionManager singleton."""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager()
    return _connection_manager


def make_watch_callback(
    store: DocumentStore,
    connection_manager: ConnectionManager,
    loop: asyncio.AbstractEventLoop,
) -> Callable[[str], None]:
    """Build the watcher callback: reload the store, then notify clients.

    The callback runs on the watchdog thread, so the broadcast is scheduled
    on the event loop.
    """

    def callback(event_type: str) -> None:
        logger.info(f"[Factory] Document {event_type} on disk, reloading")
        store.reload()
        asyncio.run_coroutine_threadsafe(
            connection_manager.notify_document_changed(store.size()), loop
        )

    return callback


def start_document_watcher() -> None:
    """Start watching the document file if enabled in config."""
    global _watcher
    config = get_config()
    if not config.watch:
        logger.info("[Factory] Document watching disabled")
        return

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.error("[Factory] No running event loop found")
        return

    store = get_document_store()
    if not store.path.parent.exists():
        logger.warning(f"[Factory] Folder not found: {store.path.parent}")
        return

    try:
        watcher = DocumentWatcher(store.path)
        watcher.set_callback(make_watch_callback(store, get_connection_manager(), loop))
        watcher.start()
        _watcher = watcher
    except Exception as e:
        logger.error(f"[Factory] Failed to start watcher for {store.path}: {e}", exc_info=True)


def stop_document_watcher() -> None:
    """Stop the running file watcher."""
    global _watcher
    if _watcher is None:
        return
    try:
        _watcher.stop()
    except Exception as e:
        logger.error(f"[Factory] Failed to stop watcher: {e}")
    _watcher = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle - startup and shutdown."""
    logger.info("[Lifespan] Loading document...")
    get_document_store()

    logger.info("[Lifespan] Starting document watcher...")
    start_document_watcher()
    try:
        yield
    finally:
        logger.info("[Lifespan] Stopping document watcher...")
        stop_document_watcher()


def create_app() -> FastAPI:
    """Create FastAPI application (composition root)."""
    from orgflow.api.notes import router as notes_router
    from orgflow.api.tags import router as tags_router
    from orgflow.api.tasks import router as tasks_router
    from orgflow.api.websocket import router as ws_router

    app = FastAPI(
        title="orgflow",
        description="Tasks and notes kept in one plain text document",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(tasks_router, prefix="/api")
    app.include_router(notes_router, prefix="/api")
    app.include_router(tags_router, prefix="/api")
    app.include_router(ws_router)  # WebSocket at /ws

    return app
