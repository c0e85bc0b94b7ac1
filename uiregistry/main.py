"""Main application module for the UI component registry service."""

from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from uiregistry.api.routes import components, examples, health, registries
from uiregistry.core.config import config
from uiregistry.db.client import Database
from uiregistry.services.registry_service import RegistryService


def _validation_message(exc: RequestValidationError) -> str:
    """Collapse pydantic errors into one readable line."""
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location)
        messages.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return "; ".join(messages) or "Invalid request"


# Lifespan context manager for startup/shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the registry service from configuration unless one was injected."""
    if getattr(app.state, "registry_service", None) is None:
        app.state.registry_service = RegistryService(Database.from_config())
        logger.info("✅ Registry service connected to Supabase")

    yield  # Application runs here

    logger.info("✅ Shutdown complete")


def create_application(service: Optional[RegistryService] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=config.app_title,
        description=config.app_description,
        version=config.app_version,
        lifespan=lifespan,
    )
    app.state.registry_service = service

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(registries.router)
    app.include_router(components.router)
    app.include_router(examples.router)
    app.include_router(health.router)

    # Error handling: every failure is reported as {"error": message}
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "message": f"Welcome to {config.app_title}",
            "version": config.app_version,
            "endpoints": {
                "http": {
                    "root": "/",
                    "health": "/health",
                    "documentation": "/docs",
                    "registries": "/api/registries",
                    "components": "/api/components",
                    "examples": "/api/examples",
                },
                "mcp": {
                    "port": config.mcp_port,
                    "transports": ["stdio", "streamable-http"],
                },
            },
        }

    return app


app = create_application()
