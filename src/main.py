"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy import text

from config.settings import settings
from src.sm_activity.api.router import router as activity_router
from src.sm_admin.api.router import router as admin_router
from src.sm_common.database import engine
from src.sm_common.errors import AppError
from src.sm_common.redis_client import close_redis, get_redis
from src.sm_common.response import error_response
from src.sm_gateway.middleware.request_log import RequestLogMiddleware
from src.sm_ledger.api.router import router as points_router
from src.sm_rewards.api.router import router as rewards_router

APP_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


async def check_redis() -> bool:
    """Ping Redis. Only the display cache uses it, so an outage is logged, not fatal."""
    try:
        redis = await get_redis()
        await redis.ping()
    except RedisError as exc:
        logger.warning("Redis unavailable at startup, balance reads go uncached: %s", exc)
        return False
    return True


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, ping Redis. Shutdown: dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await check_redis()
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version=APP_VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(points_router, prefix="/api/v1")
app.include_router(rewards_router, prefix="/api/v1")
app.include_router(activity_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": APP_VERSION}
