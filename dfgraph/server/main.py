"""
FastAPI server exposing the component browser and the compiler.

Start with:
    python -m dfgraph.server.main

Or via uvicorn directly:
    uvicorn dfgraph.server.main:app --port 3001 --reload
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dfgraph import __version__
from dfgraph.components import build_default_registry
from dfgraph.registry import ComponentRegistry
from dfgraph.server.routes import router
from dfgraph.settings import Settings

logger = logging.getLogger(__name__)


def create_app(
    registry: Optional[ComponentRegistry] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the application around an explicitly populated registry."""
    settings = settings or Settings.from_env()
    registry = registry if registry is not None else build_default_registry()

    app = FastAPI(title="dfgraph API", version=__version__)
    app.state.registry = registry
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "components": len(registry)}

    logger.info(f"dfgraph API ready with {len(registry)} components")
    return app


app = create_app()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    _settings = Settings.from_env()
    logging.basicConfig(
        level=_settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(
        "dfgraph.server.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=True,
    )
