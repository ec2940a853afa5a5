from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code} ({exc.base_error.message})")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    from src.depends import engine, get_orchestrator

    if app.state.config.CREATE_TABLES:
        import src.domain.entities  # noqa: F401  registers the tables

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    orchestrator = app.dependency_overrides.get(get_orchestrator, get_orchestrator)()
    orchestrator.start_sweeper()
    logger.info("Provisioning orchestrator started")
    try:
        yield
    finally:
        await orchestrator.shutdown()


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Tenant Provisioning API", version="0.1.0", lifespan=lifespan)
    app.state.config = ApplicationConfig

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import admin, deployment, health_check

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(deployment.router, tags=["Deployment"])
    app.include_router(admin.router, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
