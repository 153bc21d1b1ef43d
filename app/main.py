"""Main FastAPI application."""
from contextlib import asynccontextmanager
from typing import Optional
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.logging import setup_logging, get_logger
from app.core.database import engine, Base, async_session_maker
from app.core.errors import DomainError
from app.api.v1 import router as v1_router
from app import models  # noqa: F401  Force models to register with Base
from app.services.permissions import PermissionService


# Setup logging
setup_logging(settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    try:
        if settings.AUTO_CREATE_SCHEMA:
            logger.info("Ensuring database schema...")
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        async with async_session_maker() as session:
            await PermissionService.sync_permission_catalog(session)
        logger.info("Permission catalog is up to date.")
    except SQLAlchemyError as e:
        # Not raising here to prevent boot-loop if DB is reachable but slightly weird
        logger.error(f"Startup database setup failed: {e}", exc_info=True)

    yield
    logger.info(f"Shutting down {settings.APP_NAME}")
    await engine.dispose()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Multi-tenant API for agricultural supply chain traceability",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Tag every request with an id, echoed back in ``X-Request-ID``."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    logger.debug(
        f"{request.method} {request.url.path} -> {response.status_code}",
        extra={"request_id": request_id},
    )
    return response


# Include API router
app.include_router(v1_router, prefix="/api")


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Render expected service failures."""
    logger.info(
        f"{type(exc).__name__}: {exc.detail}",
        extra={"request_id": _request_id(request)},
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request bodies that fail schema validation are client errors (400)."""
    logger.warning(
        f"Validation error: {exc.errors()}",
        extra={"request_id": _request_id(request)},
    )
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"request_id": _request_id(request)},
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.APP_NAME}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/api/docs",
    }
