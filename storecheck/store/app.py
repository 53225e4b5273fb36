"""Storefront application builder."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config.schemas import StoreConfig
from ..exceptions import DatabaseError
from ..log import LogConfig, LoggerFactory
from .routes import REQUEST_FAILED, auth_router, health_router, product_router


@dataclass
class RouterDefinition:
    """Definition for a router to include."""

    router: Any  # APIRouter
    prefix: str = ""
    tags: list[str] | None = None


@dataclass
class CORSDefinition:
    """Definition for CORS configuration."""

    origins: list[str]
    allow_credentials: bool = False
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class ExceptionHandlerDefinition:
    """Definition for exception handler."""

    exc_class: type[Exception]
    handler: Callable[..., Any]


async def _database_error(request: Request, exc: Exception) -> JSONResponse:
    request.app.state.lg.warning("unhandled database error", extra={"exception": exc})
    return JSONResponse(status_code=400, content={"error": REQUEST_FAILED})


async def _invalid_request(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    if errors:
        where = ".".join(str(part) for part in errors[0]["loc"])
        message = f"Invalid request: {where}: {errors[0]['msg']}"
    else:
        message = REQUEST_FAILED
    request.app.state.lg.debug("invalid request", extra={"error": message})
    return JSONResponse(status_code=400, content={"error": message})


class StoreBuilder:
    """
    Collects router, CORS and exception handler definitions, then constructs
    the FastAPI app when build() is called.

    Example:
        >>> builder = StoreBuilder(StoreConfig())
        >>> builder.add_router(RouterDefinition(auth_router, prefix="/api/auth"))
        >>> app = builder.build(connection, lg)
    """

    def __init__(self, config: StoreConfig, title: str = "storecheck store") -> None:
        self._config = config
        self._title = title
        self._routers: list[RouterDefinition] = []
        self._exception_handlers: list[ExceptionHandlerDefinition] = []
        self._cors: CORSDefinition | None = None

    def add_router(self, router: RouterDefinition) -> StoreBuilder:
        """Add a router definition."""
        self._routers.append(router)
        return self

    def add_exception_handler(
        self, handler: ExceptionHandlerDefinition
    ) -> StoreBuilder:
        """Add an exception handler definition."""
        self._exception_handlers.append(handler)
        return self

    def set_cors(self, cors: CORSDefinition) -> StoreBuilder:
        """Set CORS configuration."""
        self._cors = cors
        return self

    def build(self, connection: Any, lg: Any) -> FastAPI:
        """
        Build the FastAPI application.

        Args:
            connection: Shared database connection, stored in app.state
            lg: Logger used by the request handlers

        Returns:
            Configured FastAPI application
        """
        app = FastAPI(title=self._title)
        app.state.connection = connection
        app.state.store = self._config
        app.state.lg = lg

        if self._cors:
            app.add_middleware(
                CORSMiddleware,
                allow_origins=self._cors.origins,
                allow_credentials=self._cors.allow_credentials,
                allow_methods=self._cors.allow_methods,
                allow_headers=self._cors.allow_headers,
            )

        for handler in self._exception_handlers:
            app.add_exception_handler(handler.exc_class, handler.handler)

        for router_def in self._routers:
            app.include_router(
                router_def.router,
                prefix=router_def.prefix,
                tags=router_def.tags,  # type: ignore[arg-type]
            )

        lg.debug("built store app", extra={"routes": len(app.routes)})
        return app


def build_app(
    connection: Any, cfg: StoreConfig | None = None, lg: Any = None
) -> FastAPI:
    """
    Build the storefront application on an existing connection.

    Args:
        connection: Shared database connection (storecheck.db.Connection)
        cfg: ``store`` config section, defaults when None
        lg: Parent logger; handlers log under ``/store``

    Returns:
        FastAPI application bound to no socket
    """
    cfg = cfg or StoreConfig()
    if lg is None:
        store_lg = LoggerFactory.create(
            "/store", LogConfig.from_params("warning", colors=False)
        )
    else:
        store_lg = LoggerFactory.derive(lg, "store")

    return (
        StoreBuilder(cfg)
        .set_cors(CORSDefinition(origins=list(cfg.cors_origins)))
        .add_exception_handler(
            ExceptionHandlerDefinition(DatabaseError, _database_error)
        )
        .add_exception_handler(
            ExceptionHandlerDefinition(RequestValidationError, _invalid_request)
        )
        .add_router(RouterDefinition(auth_router, prefix="/api/auth", tags=["auth"]))
        .add_router(
            RouterDefinition(product_router, prefix="/api/product", tags=["product"])
        )
        .add_router(RouterDefinition(health_router, prefix="/api", tags=["health"]))
        .build(connection, store_lg)
    )
