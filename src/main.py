"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8080
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.am_admin.api.router import router as admin_router
from src.am_auction.api.router import router as bid_router
from src.am_common.database import engine
from src.am_common.errors import AppError, InvalidInputError
from src.am_common.redis_client import close_redis, get_redis, redis_available
from src.am_common.response import render_error
from src.am_gateway.middleware.request_log import RequestLogMiddleware
from src.am_listing.api.router import router as listing_router
from src.am_listing.api.status_router import router as product_status_router
from src.am_verification.api.router import router as verification_router
from src.am_wallet.api.router import router as wallet_router

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
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
    return render_error(request, exc.http_status, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    detail = first.get("msg", "Invalid request")
    message = f"{location}: {detail}" if location else detail
    code = InvalidInputError(message).code
    return render_error(request, 422, code, message)


app.include_router(wallet_router, prefix="/api/v1")
app.include_router(listing_router, prefix="/api/v1")
app.include_router(verification_router, prefix="/api/v1")
app.include_router(bid_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(product_status_router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Redis down means status push falls back to polling, not an outage."""
    redis_ok = await redis_available()
    return {
        "status": "ok" if redis_ok else "degraded",
        "redis": redis_ok,
        "version": APP_VERSION,
    }
