from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .db.dal import Database
from .core import errors
from .routers import expenses

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


async def security_headers_middleware(request, call_next):  # type: ignore
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)
    logger = logging.getLogger("expense_api")

    # One connection for the whole process, handed to handlers via app.state
    try:
        db = Database.open(settings.db_path)  # type: ignore[arg-type]
    except Exception:
        logger.exception("failed to open database on startup")
        raise

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "starting %s (%s)", settings.app_name, settings.environment
        )
        yield
        db.close()
        logger.info("database closed")

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.db = db
    app.state.settings = settings

    # Error handlers
    server_error_handler = errors.make_server_error_handler(
        expose_details=settings.expose_error_details
    )

    # Middleware, innermost first (boundary, request id / access logging,
    # security headers, CORS)
    app.middleware("http")(errors.make_boundary_middleware(server_error_handler))
    app.middleware("http")(request_context_middleware)
    app.middleware("http")(security_headers_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Location"],
    )

    app.add_exception_handler(errors.StoreError, server_error_handler)
    app.add_exception_handler(errors.ExpenseServiceError, errors.expense_error_handler)
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, server_error_handler)

    # Routers
    app.include_router(expenses.router)

    @app.get("/")
    async def root():
        return {"message": "Expense Service API", "version": settings.version}

    return app


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
