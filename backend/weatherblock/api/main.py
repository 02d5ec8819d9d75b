from __future__ import annotations

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weatherblock.api.routers import weather
from weatherblock.config import WeatherblockConfig, load_config
from weatherblock.services.block import BlockHandle, register


def create_app(config: Optional[WeatherblockConfig] = None, block: Optional[BlockHandle] = None) -> FastAPI:
    config = config or load_config()
    app = FastAPI(title="Weatherblock API", version=config.version)
    if block is None:
        block = register(config)
    app.state.config = config
    app.state.block = block

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[os.getenv("FRONTEND_ORIGIN", "http://localhost:5174")],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # No API key, no block: the routes are simply not mounted.
    if block is not None:
        app.include_router(weather.router, prefix=f"/{config.namespace}")
    return app


app = create_app()
