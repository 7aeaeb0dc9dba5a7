"""
FastAPI server for NetDeploy.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from .. import __version__
from ..config import API_PREFIX, Config, get_config
from ..registry.devices import get_device_registry
from .errors import install_error_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    registry = get_device_registry()
    logger.info(f"NetDeploy API ready ({len(registry)} devices registered)")

    yield

    logger.info(f"NetDeploy API stopping ({len(registry)} devices will be discarded)")


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create the FastAPI application."""
    from .routes import router

    if config:
        from ..config import set_config
        set_config(config)
    config = get_config()

    app = FastAPI(
        title="NetDeploy",
        description="Registry of the networking devices in a deployment",
        version=__version__,
        lifespan=lifespan,
        debug=config.server.debug,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)

    app.include_router(router, prefix=API_PREFIX)

    # Health check
    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "version": __version__,
            "device_count": len(get_device_registry()),
        }

    return app


def run_server(
    host: str = "0.0.0.0",
    port: int = 8080,
    reload: bool = False
):
    """Run the server with uvicorn."""
    config = get_config()
    # Registry state is per process, so always a single worker
    uvicorn.run(
        "netdeploy.api.server:app" if reload else create_app(),
        host=host,
        port=port,
        reload=reload,
        workers=1,
        log_level="debug" if config.server.debug else "info"
    )


# Create app instance for uvicorn
app = create_app()
