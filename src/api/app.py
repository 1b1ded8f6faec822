import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from sqlmodel import SQLModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from .error import ClientError, ServerError
from .utils.cors import cors_json_response

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    logger.warning(f"Client error: {exc.base_error.code} ({exc.status_code})")
    return cors_json_response(
        request, exc.status_code, {"success": False, "message": exc.base_error.message}
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code}")
    return cors_json_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"success": False, "message": exc.base_error.message},
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP error: {exc.status_code} {request.method} {request.url.path}")
    return cors_json_response(
        request, exc.status_code, {"success": False, "message": str(exc.detail)}
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return cors_json_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"success": False, "message": "Server error."},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.auto_create_tables:
        from src.depends import engine

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    yield


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Password Reset API", version="0.1.0", lifespan=lifespan)

    app.state.allowed_origin = ApplicationConfig.ALLOWED_ORIGIN
    app.state.auto_create_tables = ApplicationConfig.AUTO_CREATE_TABLES

    from src.api.routes import health_check, password_reset

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(password_reset.router, prefix=ApplicationConfig.API_PREFIX)

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
