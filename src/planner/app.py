"""Application factory for the FastAPI service."""

from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import DEFAULT_JWT_SECRET, Settings, get_settings
from .database import Database
from .planning import (
    EventRepository,
    EventService,
    TaskRepository,
    TaskService,
    TodoRepository,
    TodoService,
)
from .routers.auth import router as auth_router
from .routers.dependencies import planning_access
from .routers.events import router as events_router
from .routers.signs import router as signs_router
from .routers.tasks import router as tasks_router
from .routers.todos import router as todos_router
from .routers.users import router as users_router
from .services.auth import TokenIssuer
from .services.signs import SignRepository, SignService
from .services.users import UserRepository, UserService

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure logging based on LOG_LEVEL environment variable."""
    # Load .env file first to ensure LOG_FILE is available
    load_dotenv()

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handlers: list[logging.Handler] = []

    log_file = os.getenv("LOG_FILE")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Always add console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    logging.getLogger("planner").setLevel(log_level)
    logging.getLogger("uvicorn").setLevel(log_level)
    logging.getLogger("uvicorn.access").setLevel(log_level)
    logging.getLogger("uvicorn.error").setLevel(log_level)

    # aiosqlite logs every statement at DEBUG
    if log_level > logging.DEBUG:
        logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    # Configure logging first thing
    _configure_logging()

    settings = settings or get_settings()

    project_root = Path(__file__).resolve().parent.parent.parent
    database_path = settings.database_path
    if not database_path.is_absolute():
        database_path = (project_root / database_path).resolve()

    database = Database(database_path)
    event_repository = EventRepository(database)
    task_repository = TaskRepository(database)
    todo_repository = TodoRepository(database)

    event_service = EventService(
        database,
        event_repository,
        task_repository,
        todo_repository,
        logger=logging.getLogger("planner.events"),
    )
    task_service = TaskService(
        database,
        task_repository,
        todo_repository,
        logger=logging.getLogger("planner.tasks"),
    )
    todo_service = TodoService(
        database,
        todo_repository,
        task_repository,
        event_repository,
        logger=logging.getLogger("planner.todos"),
    )
    sign_service = SignService(SignRepository(database))
    user_service = UserService(UserRepository(database), logger=logging.getLogger("planner.users"))
    token_issuer = TokenIssuer(settings.jwt_secret.get_secret_value(), settings.jwt_ttl)

    if settings.jwt_secret.get_secret_value() == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; using the development default")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await database.initialize()
            if settings.admin_username and settings.admin_password:
                await user_service.ensure_admin(
                    settings.admin_username,
                    settings.admin_password.get_secret_value(),
                )
        except Exception as exc:
            logger.error("Startup failed: %s", exc)
            raise
        try:
            yield
        finally:
            await database.close()

    app = FastAPI(
        title="Planner Backend",
        version="0.1.0",
        description="Events, tasks and todos with time-window validation.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.event_service = event_service
    app.state.task_service = task_service
    app.state.todo_service = todo_service
    app.state.sign_service = sign_service
    app.state.user_service = user_service
    app.state.token_issuer = token_issuer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.exception(
                "%s %s failed (%.1f ms)", request.method, request.url.path, elapsed_ms
            )
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    planning_dependencies = [Depends(planning_access)]
    app.include_router(events_router, dependencies=planning_dependencies)
    app.include_router(tasks_router, dependencies=planning_dependencies)
    app.include_router(todos_router, dependencies=planning_dependencies)
    app.include_router(signs_router, dependencies=planning_dependencies)
    app.include_router(auth_router)
    app.include_router(users_router)

    @app.get("/health", tags=["health"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok", "database": str(database.path)}

    return app


__all__ = ["create_app"]
