# backend/liveeditor/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from . import __version__, config
from .explorer.bridge import BridgeClient
from .explorer.discovery import DiscoveryProbe
from .explorer.session import ExplorerSession
from .routes.explorer import router as explorer_router

logger = logging.getLogger(__name__)


def create_app(bridge: Optional[BridgeClient] = None) -> FastAPI:
    """
    Build the dashboard application.

    `bridge` lets callers (tests, embedding dashboards) supply their own
    BridgeClient; by default one is created from config.BRIDGE_URL.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        - Connect to the reflection bridge.
        - Create the Explorer session and the discovery cache.
        - Warm the discovery cache from the bridge's saved result (best effort).
        """
        # Startup
        client = bridge or BridgeClient(config.BRIDGE_URL, config.BRIDGE_TIMEOUT)
        app.state.bridge = client
        app.state.explorer_session = ExplorerSession(
            client,
            default_class=config.DEFAULT_CLASS,
            max_items=config.DEFAULT_MAX_ITEMS,
        )
        discovery = DiscoveryProbe(client)
        app.state.discovery = discovery

        persisted = await discovery.load_persisted()
        if persisted is not None:
            logger.info("Loaded persisted discovery: %d roles", len(persisted.properties))
        logger.info("Live editor explorer ready (bridge: %s)", client.base_url)

        yield

        # Shutdown
        if bridge is None:
            await client.aclose()
        logger.info("Live editor explorer stopped")

    app = FastAPI(title="Live Editor", version=__version__, lifespan=lifespan)
    app.include_router(explorer_router)
    return app


app = create_app()
