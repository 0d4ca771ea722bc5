"""FastAPI application entrypoint for the Employee Directory API."""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routers import departments, employees, health, roles
from config import API_VERSION, CORS_ORIGINS, STATIC_DIR
from db.database import create_store_engine, init_db
from directory.errors import DirectoryError
from logger_config import setup_logger

logger = setup_logger("api.startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    owns_engine = app.state.engine is None
    if owns_engine:
        app.state.engine = create_store_engine()
        logger.info(f"Connected to {app.state.engine.url.render_as_string(hide_password=True)}")
    init_db(app.state.engine)
    yield
    if owns_engine:
        app.state.engine.dispose()


# ---------------------------------------------------------------------------
# Error bodies: always {"error": "..."}
# ---------------------------------------------------------------------------


def _directory_error(request: Request, exc: DirectoryError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())[1:])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(parts) or "Invalid request"},
    )


def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    # Handlers may run off the raising thread, so pass the exception explicitly
    logger.error(f"{request.method} {request.url.path} failed", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Server error"},
    )


def create_app(engine: Engine | None = None, static_dir: Path | None = STATIC_DIR) -> FastAPI:
    """Build the application.

    Pass ``engine`` to run against an existing store (tests); otherwise one is
    created from ``config.DATABASE_URL`` when the app starts.
    """
    app = FastAPI(title="Employee Directory API", version=API_VERSION, lifespan=lifespan)
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    app.add_exception_handler(DirectoryError, _directory_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)

    app.include_router(health.router)
    app.include_router(employees.router, prefix="/api/employees", tags=["employees"])
    app.include_router(departments.router, prefix="/api/departments", tags=["departments"])
    app.include_router(roles.router, prefix="/api/roles", tags=["roles"])

    # Mounted last so the API routes take precedence over "/"
    if static_dir is not None and static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="public")
    elif static_dir is not None:
        logger.warning(f"Static directory {static_dir} not found; browser client disabled")

    return app


app = create_app()
