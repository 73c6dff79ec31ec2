"""FastAPI application factory."""

import os

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from linkstash.common.logging_config import get_logger
from linkstash.errors import (
    InvalidCredentialsError,
    MappingNotFoundError,
    RandomSourceError,
    StorageError,
    UnauthorizedError,
)

from .api import api_router
from .web import redirect_router, web_router
from .middleware.logging import LoggingMiddleware

logger = get_logger("web")


def _is_api_request(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _register_exception_handlers(app: FastAPI) -> None:
    """Map core errors to HTTP responses."""

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        if _is_api_request(request):
            return JSONResponse(
                {"error": "Unauthorized", "detail": str(exc)},
                status_code=status.HTTP_401_UNAUTHORIZED,
                headers={"WWW-Authenticate": "Bearer"},
            )
        # Browser pages go back to the login form
        return RedirectResponse(url="/admin", status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(InvalidCredentialsError)
    async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
        return JSONResponse(
            {"error": "Invalid credentials", "detail": str(exc)},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    @app.exception_handler(MappingNotFoundError)
    async def not_found_handler(request: Request, exc: MappingNotFoundError):
        return JSONResponse(
            {"error": "Not found", "detail": str(exc)},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            {"error": "Storage failure", "detail": str(exc)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(RandomSourceError)
    async def random_source_handler(request: Request, exc: RandomSourceError):
        logger.critical(f"Secure random source failed: {exc}")
        return JSONResponse(
            {"error": "Internal error", "detail": "Could not create a session"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def create_app(service_instance, config) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: LinkService instance (None until the lifespan sets it)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="linkstash",
        description="URL shortener with visit analytics and an admin dashboard",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(LoggingMiddleware)

    _register_exception_handlers(app)

    base_path = os.path.join(os.path.dirname(__file__), "..", "ux", "web")
    css_path = os.path.join(base_path, "css")
    js_path = os.path.join(base_path, "js")

    if os.path.exists(css_path):
        app.mount("/css", StaticFiles(directory=css_path), name="css")
    if os.path.exists(js_path):
        app.mount("/js", StaticFiles(directory=js_path), name="js")

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])
    # Last, so fixed paths win when path_prefix is empty
    redirect_prefix = config.path_prefix.strip("/")
    app.include_router(
        redirect_router,
        prefix=f"/{redirect_prefix}" if redirect_prefix else "",
        tags=["Web"],
    )

    return app
