from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todoflow import __version__
from todoflow.api.routes import chat, health, todos, tools
from todoflow.application.chat_service import ChatService
from todoflow.application.factory import TodoflowFactory
from todoflow.application.settings import get_settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI startup/shutdown events."""
    await logger.ainfo("fastapi.startup", message="Todoflow API starting...")
    yield
    await logger.ainfo("fastapi.shutdown", message="Todoflow API shutting down...")


def create_app(chat_service: ChatService | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        chat_service: Pre-built service (tests); built from settings otherwise
    """
    if chat_service is None:
        settings = get_settings()
        chat_service = TodoflowFactory(settings.config_dir).create_chat_service(settings.profile)

    app = FastAPI(
        title="Todoflow API",
        description="Chat-driven todo agent: plan, execute, dispatch, evaluate",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.chat_service = chat_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure based on environment
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chat.router, prefix="/api/v1", tags=["chat"])
    app.include_router(todos.router, prefix="/api/v1", tags=["todos"])
    app.include_router(tools.router, prefix="/api/v1", tags=["tools"])
    app.include_router(health.router, tags=["health"])

    return app
