import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.utils.jwt import TokenIssuer
from src.app.services.password_hasher import PasswordHasher
from .error import ClientError, ServerError
from .session_cleanup import periodic_session_cleanup, run_session_cleanup

logger = logging.getLogger(__name__)


def _envelope(code: str, message: str, **extra) -> dict:
    return {"success": False, "code": code, "message": message, **extra}


async def handle_client_error(request: Request, exc: ClientError):
    content = _envelope(exc.base_error.code, exc.base_error.message)
    logger.warning(f"Client error: {content}")
    return JSONResponse(status_code=exc.status_code, content=content)


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code} {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(exc.base_error.code, "Internal server error"),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    logger.warning(f"Validation failed: {request.method} {request.url.path} {errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_envelope("VALIDATION_FAILED", "Validation failed", errors=errors),
    )


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope("HTTP_ERROR", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error: {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope("INTERNAL_ERROR", "Internal server error"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = app.state.config
    factory = app.state.session_factory

    if config.DB_CREATE_ALL:
        async with app.state.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    if config.SESSION_SWEEP_ON_STARTUP:
        try:
            await run_session_cleanup(factory, config.SESSION_RETENTION_DAYS)
        except Exception:
            logger.exception("Error running startup session cleanup")

    task = None
    if config.SESSION_SWEEP_INTERVAL_SECONDS > 0:
        task = asyncio.create_task(
            periodic_session_cleanup(
                factory,
                config.SESSION_RETENTION_DAYS,
                config.SESSION_SWEEP_INTERVAL_SECONDS,
            )
        )

    yield

    if task is not None:
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
    await app.state.engine.dispose()


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Session Auth API", version="0.1.0", lifespan=lifespan)

    engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)
    app.state.config = ApplicationConfig
    app.state.engine = engine
    app.state.session_factory = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    app.state.token_issuer = TokenIssuer.from_config(ApplicationConfig)
    app.state.password_hasher = PasswordHasher(ApplicationConfig.BCRYPT_ROUNDS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import auth, health_check, sessions

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, prefix=prefix, tags=["Health"])
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(sessions.router, prefix=prefix, tags=["Sessions"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
