"""
SimulaFin - property financing simulator API.
SAC simulations, signed proposals and the administrative review workflow.
"""
from typing import Callable, Awaitable, Dict, Any
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import time
from uuid import uuid4

from simulafin.core.config import settings
from simulafin.core.database import init_db
from simulafin.core.exceptions import (
    SimulaFinError,
    InvalidInputError,
    InvalidStatusError,
    InvalidTransitionError,
    NotAuthenticatedError,
    NotFoundError,
    PersistenceError,
    UnauthorizedError,
)
from simulafin.core.logger import logger
from simulafin.auth.router import router as auth_router
from simulafin.financiamento.router import router as financing_router
from simulafin.propostas.router import router as proposals_router
from simulafin.admin.router import router as admin_router
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management (startup/shutdown hooks)."""
    logger.info(f"Initializing {settings.APP_NAME} v{settings.VERSION}")
    init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Property financing simulator (SAC) with signed proposals and admin review.",
    lifespan=lifespan
)

# Trust X-Forwarded-Proto headers from the load balancer
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_correlation_id(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """
    Injects a Correlation ID into the request context and propagates it to the response headers.
    """
    correlation_id = request.headers.get("X-Correlation-ID", str(uuid4()))
    request.state.correlation_id = correlation_id

    start_time = time.time()

    logger.info(
        f"Request: {request.method} {request.url.path}",
        extra={"correlation_id": correlation_id}
    )

    response = await call_next(request)

    process_time = time.time() - start_time
    response.headers["X-Correlation-ID"] = correlation_id
    response.headers["X-Process-Time"] = str(process_time)

    logger.info(
        f"Response: {response.status_code} | {process_time:.3f}s",
        extra={"correlation_id": correlation_id}
    )

    return response


app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(financing_router, prefix="/financiamento", tags=["Financing"])
app.include_router(proposals_router, prefix="/propostas", tags=["Proposals"])
app.include_router(admin_router, prefix="/admin", tags=["Admin"])


@app.get("/api-info", tags=["Health"])
def api_info() -> Dict[str, Any]:
    """
    Endpoint exposing API metadata and service discovery links.
    """
    return {
        "app": settings.APP_NAME,
        "version": settings.VERSION,
        "status": "online",
        "endpoints": {
            "simulate": "/financiamento/simular",
            "simulations": "/financiamento/simulacoes",
            "submit_proposal": "/propostas",
            "my_proposals": "/propostas/minhas",
            "admin_submissions": "/admin/submissoes",
            "docs": "/docs",
            "redoc": "/redoc"
        }
    }


@app.get("/health", tags=["Health"])
def health_check() -> Dict[str, str]:
    """
    Liveness probe endpoint for orchestration systems.
    """
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.VERSION
    }


# Domain error -> HTTP status. Order matters: subclasses first.
ERROR_STATUS_CODES = [
    (InvalidTransitionError, 409),
    (InvalidStatusError, 422),
    (InvalidInputError, 400),
    (NotAuthenticatedError, 401),
    (UnauthorizedError, 403),
    (NotFoundError, 404),
    (PersistenceError, 503),
]


def _status_code_for(exc: SimulaFinError) -> int:
    for error_cls, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_cls):
            return status_code
    return 400


@app.exception_handler(SimulaFinError)
async def domain_exception_handler(request: Request, exc: SimulaFinError):
    """
    Translates domain errors into user-facing JSON messages.
    Unauthenticated browser requests also get the stale access-token cookie cleared.
    """
    correlation_id = getattr(request.state, "correlation_id", "N/A")
    status_code = _status_code_for(exc)

    log = logger.error if isinstance(exc, PersistenceError) else logger.info
    log(
        f"{type(exc).__name__}: {exc.message} | status={status_code}",
        extra={"correlation_id": correlation_id}
    )

    response = JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "correlation_id": correlation_id}
    )
    if isinstance(exc, NotAuthenticatedError) and "text/html" in request.headers.get("accept", ""):
        response.delete_cookie("access_token")
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    correlation_id = getattr(request.state, "correlation_id", "N/A")

    logger.info(
        f"HTTPException: {exc.status_code}",
        extra={"correlation_id": correlation_id}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "correlation_id": correlation_id}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception barrier.
    Logs stack traces with Correlation IDs and returns a sanitized 500 response.
    """
    correlation_id = getattr(request.state, "correlation_id", "N/A")

    logger.error(
        f"Unhandled exception: {str(exc)}",
        exc_info=True,
        extra={"correlation_id": correlation_id}
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal Server Error",
            "correlation_id": correlation_id
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "simulafin.main:app",
        host="0.0.0.0",  # nosec
        port=8000,
        reload=settings.DEBUG
    )
