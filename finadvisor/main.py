# finadvisor/main.py
import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .crud import RESOURCE_KINDS
from .database import init_db
from .errors import AppError, ServerError, ValidationError
from .log import configure_logging
from .routers import goals, health, resources, seed, users

settings = get_settings()
configure_logging(settings)
logger = structlog.get_logger(__name__)

# Create tables
init_db()

app = FastAPI(title="Financial Advisor API")

# -----------------------------
# CORS
# -----------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# -----------------------------
# Routers
# -----------------------------
app.include_router(health.router)
app.include_router(users.router)
app.include_router(seed.router)
for kind in RESOURCE_KINDS:
    app.include_router(resources.build_router(kind))
app.include_router(goals.router)


@app.get("/")
def root():
    return {"message": "Welcome to Financial Advisor API"}


# -----------------------------
# Global Error Handlers
# -----------------------------
# Account and seed routes answer failures with a bare {message}.
BARE_ERROR_PREFIXES = ("/api/users", "/api/seed")


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    if request.url.path.startswith(BARE_ERROR_PREFIXES):
        content = {"message": message}
    else:
        content = {"success": False, "message": message}
    return JSONResponse(status_code=status_code, content=content)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return f"{location}: {first.get('msg')}" if location else first.get("msg", ValidationError.default_message)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return error_response(request, exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(request, 400, _describe_validation_error(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(request, exc.status_code, str(exc.detail))


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error("database_error", path=request.url.path, exc_info=exc)
    error = ServerError()
    return error_response(request, error.status_code, error.message)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_error", path=request.url.path, exc_info=exc)
    error = ServerError()
    return error_response(request, error.status_code, error.message)
