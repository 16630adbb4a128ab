import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from . import config
from .db import create_store_engine, create_session_factory
from .errors import TopologyError
from .logging_config import setup_logging
from .services.schema import ensure_schema
from .api import devices, links, topology, health

logger = logging.getLogger(__name__)


def flatten_validation_errors(errors) -> dict:
    """Collapse pydantic errors to {formErrors: [...], fieldErrors: {field: [...]}}."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for err in errors:
        msg = err.get("msg", "Invalid value").removeprefix("Value error, ")
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        if loc and err.get("type") != "json_invalid":
            field_errors.setdefault(".".join(loc), []).append(msg)
        else:
            form_errors.append(msg)
    return {"message": "Validation failed", "formErrors": form_errors, "fieldErrors": field_errors}


def create_app(database_url: Optional[str] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        # one engine (and pool) for the life of the process, handed to requests via app.state
        engine = create_store_engine(database_url or config.DATABASE_URL)
        ensure_schema(engine)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        logger.info("API ready")
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(title="Topology Map", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any(err.get("loc") and err["loc"][0] == "path" for err in errors):
            content = {"message": "Invalid id"}
        else:
            content = flatten_validation_errors(errors)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)

    @app.exception_handler(TopologyError)
    async def topology_exception_handler(request: Request, exc: TopologyError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

    app.include_router(health.router, prefix="/api")
    app.include_router(topology.router, prefix="/api")
    app.include_router(devices.router, prefix="/api")
    app.include_router(links.router, prefix="/api")
    return app


app = create_app()


def run() -> None:
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)


if __name__ == "__main__":
    run()
