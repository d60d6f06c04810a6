"""
Alfred — Slack channel monitoring configuration backend.

App factory: middleware, exception handlers, routers, health.

Error contract:
- AppError → its own status, {"errors": [{id, status, title, detail}]}
- Request validation failures → 400 bad_request
- Anything else → 500 internal_server_error (logged with request id)

Run with: uvicorn alfred.main:app --reload
"""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import APP_VERSION, settings
from .errors import AppError, bad_request
from .http_client import close_clients
from .logging_config import setup_logging
from .rate_limit import limiter
from .routers import auth, conf
from .schemas.errors import ErrorResponse
from .startup import run_startup_migrations

setup_logging(settings.log_level, settings.env)


@asynccontextmanager
async def lifespan(app: FastAPI):
    run_startup_migrations()
    logger.info("Alfred {} starting (env={})", APP_VERSION, settings.env)
    yield
    await close_clients()


app = FastAPI(title="Alfred", version=APP_VERSION, lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


# ── Middleware ───────────────────────────────────────────────────────

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = uuid.uuid4().hex[:8]
    request.state.request_id = request_id
    start = time.perf_counter()
    with logger.contextualize(request_id=request_id):
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("{} {} → {} ({:.0f}ms)", request.method, request.url.path,
                    response.status_code, elapsed_ms)
    response.headers["X-Request-ID"] = request_id
    for name, value in _SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


# ── Exception handlers ───────────────────────────────────────────────


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")


def _error_response(request: Request, errors: list[dict], status: int) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(errors=errors, request_id=_request_id(request)).model_dump(),
        headers={"X-Request-ID": _request_id(request)},
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return _error_response(request, [exc.to_dict()], exc.status)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected malformed request to {}: {}", request.url.path, exc.errors())
    err = bad_request()
    return _error_response(request, [err.to_dict()], err.status)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    title = "Not Found" if exc.status_code == 404 else "HTTP Error"
    err = {"id": f"http_{exc.status_code}", "status": exc.status_code,
           "title": title, "detail": str(exc.detail)}
    return _error_response(request, [err], exc.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error("Unhandled error on {} {} [{}]",
                                    request.method, request.url.path, _request_id(request))
    err = {"id": "internal_server_error", "status": 500, "title": "Internal Server Error",
           "detail": "An unexpected error occurred."}
    return _error_response(request, [err], 500)


# ── Routers ──────────────────────────────────────────────────────────

app.include_router(auth.router)
app.include_router(conf.router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": APP_VERSION}
