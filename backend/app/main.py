from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from kgmemory.graph.errors import EntityNotFoundError, InvalidRecordError

from backend.app.config import AppConfig
from backend.app.api.routes_graph import router as graph_router
from backend.app.api.routes_tools import router as tools_router
from backend.app.dependencies import (
    get_config,
    get_engine,
    seed_graph,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle hooks.

    Builds the store and engine once at startup and imports the
    configured seed tables.
    """
    seed_graph(get_engine(), get_config())

    yield


async def _entity_not_found(_: Request, exc: EntityNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc), "entity_name": exc.entity_name},
    )


async def _invalid_record(_: Request, exc: InvalidRecordError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app(config: AppConfig) -> FastAPI:
    app = FastAPI(
        title=config.app_name,
        lifespan=lifespan,
    )

    app.add_exception_handler(EntityNotFoundError, _entity_not_found)
    app.add_exception_handler(InvalidRecordError, _invalid_record)

    app.include_router(
        graph_router,
        prefix=f"{config.api_prefix}/graph",
        tags=["graph"],
    )

    app.include_router(
        tools_router,
        prefix=f"{config.api_prefix}/tools",
        tags=["tools"],
    )

    return app


config = AppConfig()
app = create_app(config)
