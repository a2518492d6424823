# api/main.py

from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dexmetrics import EngineContainer, create_metrics_engine, shutdown_metrics_engine
from dexmetrics.core.logging import EngineLogger, log_with_context
from dexmetrics.database.connection import DatabaseManager

from .routers import pools, tokens, stats, portfolio, trades
from .dependencies import set_dependencies, get_container


def create_app(container: Optional[EngineContainer] = None) -> FastAPI:
    """Build the API. Without a container one is created from the environment at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger = EngineLogger.get_logger('api.main')

        engine = container or create_metrics_engine()
        set_dependencies(engine)
        log_with_context(logger, logging.INFO, "API startup completed")

        yield

        logger.info("API shutting down")
        set_dependencies(None)
        if container is None:
            shutdown_metrics_engine(engine)

    app = FastAPI(
        title="DEX Metrics API",
        description="Prices, volume, TVL and portfolio history derived from the DEX transaction log",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(pools.router, prefix="/pools", tags=["pools"])
    app.include_router(tokens.router, prefix="/tokens", tags=["tokens"])
    app.include_router(stats.router, prefix="/stats", tags=["stats"])
    app.include_router(portfolio.router, prefix="/portfolio", tags=["portfolio"])
    app.include_router(trades.router, prefix="/trades", tags=["trades"])

    @app.get("/health")
    def health_check():
        engine = get_container()
        return {
            "status": "healthy",
            "message": "Metrics API is running",
            "database_connected": engine.get(DatabaseManager).health_check(),
        }

    @app.get("/")
    async def root():
        return {
            "message": "DEX Metrics API",
            "version": "1.0.0",
            "endpoints": {
                "health": "/health",
                "pools": "/pools",
                "tokens": "/tokens/overview",
                "stats": "/stats/volume",
                "portfolio": "/portfolio/balance-history",
                "trades": "/trades/recent",
                "docs": "/docs"
            }
        }

    return app


app = create_app()
