# tourist_router/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tourist_router.api.v1 import routes_health, routes_nodes, routes_routing
from tourist_router.core.config import settings
from tourist_router.core.errors import (
    DataSourceError,
    InvalidNodeError,
    UnresolvableWaypointError,
)
from tourist_router.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.GRAPH_WARMUP_ON_STARTUP:
        # A DataSourceError here aborts startup.
        logger.info("Warming up routing graph on startup")
        routes_routing.graph_manager.get()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="A* routing over an OSM extract, with multi-stop and POI-aware routes.",
        lifespan=lifespan,
    )

    # Routers
    app.include_router(routes_health.router, prefix="", tags=["health"])
    app.include_router(routes_routing.router, prefix="", tags=["routing"])
    app.include_router(routes_nodes.router, prefix="", tags=["nodes"])

    @app.exception_handler(DataSourceError)
    async def data_source_error_handler(request: Request, exc: DataSourceError) -> JSONResponse:
        logger.error(f"Routing data unavailable for {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(UnresolvableWaypointError)
    async def waypoint_error_handler(request: Request, exc: UnresolvableWaypointError) -> JSONResponse:
        logger.warning(f"Unresolvable waypoint: {exc}")
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "waypoint_index": exc.index},
        )

    @app.exception_handler(InvalidNodeError)
    async def invalid_node_handler(request: Request, exc: InvalidNodeError) -> JSONResponse:
        logger.error(f"Invalid node id: {exc}")
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


app = create_app()
