from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.sessions import SessionMiddleware

from shortlink.core.config import settings
from shortlink.core.exceptions import RepositoryError, ShortLinkError
from shortlink.core.logging_config import configure_logging
from shortlink.db.Connection import database
from shortlink.db.Models import models
from shortlink.api import admin, auth, shortener
from shortlink.routers import health
from shortlink import RateLimitHelper

logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")
    models.Base.metadata.create_all(bind=database.engine)
    logger.info("Database models initialized/checked.")
    database.verify_database_connection()
    database.verify_redis_connection()
    yield
    logger.info("Shutting down gracefully...")
    database.engine.dispose()
    database.redis_client.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="URL shortener with reversible share tokens",
    lifespan=lifespan,
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
    https_only=settings.SESSION_HTTPS_ONLY,
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(shortener.router)


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    if not settings.RATE_LIMIT_ENABLED or not RateLimitHelper.is_protected_path(request.url.path):
        return await call_next(request)

    limit, window = RateLimitHelper.get_rate_limit_config(database.redis_client)
    client_ip = RateLimitHelper.get_client_ip(request)
    key = f"rate_limit:{client_ip}"

    allowed = RateLimitHelper.check_rate_limit(database.redis_client, key, limit, window)
    if allowed is False:
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            headers={"Retry-After": str(window)},
            content={"detail": f"Too many requests. Limit is {limit} per {window} seconds."}
        )

    return await call_next(request)


@app.exception_handler(ShortLinkError)
async def shortlink_exception_handler(request: Request, exc: ShortLinkError):
    if isinstance(exc, RepositoryError) and exc.status_code >= 500:
        logger.error(f"Store error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return PlainTextResponse("a storage error occurred", status_code=exc.status_code)
    return PlainTextResponse(exc.detail, status_code=exc.status_code)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
