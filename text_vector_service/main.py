import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings
from .errors import ServiceError
from .routes import indexes_router, system_router, texts_router
from .services.embedder import Embedder, make_embedder
from .services.index_client import IndexClient, make_index_client


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


def _validation_message(errors) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid request: " + "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as {"status": "error", "message": ...}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error(400, _validation_message(exc.errors()))

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logging.error(f"[Server] Unhandled error: {exc}", exc_info=True)
        return _error(500, str(exc))


def create_app(
    settings: Optional[Settings] = None,
    embedder: Optional[Embedder] = None,
    index_client: Optional[IndexClient] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Text Vector Service",
        version=__version__,
        description="Converts text to embeddings and stores/searches them in a vector index",
    )

    app.state.settings = settings
    app.state.embedder = embedder or make_embedder(settings)
    app.state.index_client = index_client or make_index_client(settings)

    register_exception_handlers(app)

    # Register routers
    app.include_router(system_router)
    app.include_router(texts_router)
    app.include_router(indexes_router)

    return app


def run() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logging.info("Starting Text Vector Service...")
    logging.info(
        f"Index backend: {settings.index_backend}, embedding mode: {settings.embedding_mode} "
        f"({settings.embedding_model})"
    )
    logging.info(f"Server URL: http://localhost:{settings.port}")

    # uvicorn exits non-zero if it cannot bind, and handles SIGINT/SIGTERM
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
