"""Request logging, the catch-all error boundary and validation error mapping."""

import time

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.schemas.github import ErrorResponse

logger = structlog.get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Origin", "Content-Type", "Accept", "Authorization"]


def install_middleware(app: FastAPI, cors_origins: list[str]) -> None:
    """Register middleware and exception handlers on ``app``.

    Order matters: CORS is added last so it wraps the request logger, which
    in turn wraps the routes.
    """
    app.middleware("http")(log_requests)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )


async def log_requests(request: Request, call_next):
    """Log one record per request and turn unhandled exceptions into a 500."""
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("unhandled_exception", method=request.method, path=request.url.path)
        response = JSONResponse(
            ErrorResponse(error="Internal server error").model_dump(),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    status_code = response.status_code
    log = logger.bind(
        status_code=status_code,
        latency_ms=round((time.perf_counter() - start) * 1000, 3),
        client_ip=request.client.host if request.client else None,
        method=request.method,
        path=request.url.path,
    )
    if status_code >= 500:
        log.error("server_error")
    elif status_code >= 400:
        log.warning("client_error")
    else:
        log.info("request_processed")
    return response


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map FastAPI's 422 into a 400 with the uniform error envelope."""
    logger.warning("request_validation_failed", path=request.url.path, errors=str(exc.errors()))
    return JSONResponse(
        ErrorResponse(error=_describe(exc)).model_dump(),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def _describe(exc: RequestValidationError) -> str:
    problems = []
    for err in exc.errors():
        if err.get("type") == "json_invalid":
            problems.append("body is not valid JSON")
            continue
        loc = list(err.get("loc", ()))
        if loc and loc[0] in ("body", "path", "query"):
            loc = loc[1:]
        field = ".".join(str(part) for part in loc)
        problems.append(f"{field}: {err['msg']}" if field else err["msg"])
    return "Invalid request: " + "; ".join(problems) if problems else "Invalid request"
