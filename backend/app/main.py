from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from app.api.api import api_router
from app.core.config import settings
from app.core.exceptions import AppError, StoreError
from app.core.middleware import page_gate
from app.db.base import Base
from app.db.init_db import init_db
from app.db.session import engine, SessionLocal
import logging
import os

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        init_db(db)
    finally:
        db.close()
    logger.info("✅ Database ready")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_STR}/openapi.json",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Trust proxy headers (X-Forwarded-Proto, X-Forwarded-For) from reverse proxies like HAProxy/nginx
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

# Redirect page navigation without an auth cookie to the login page
app.middleware("http")(page_gate)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        if location and location[0] not in fields:
            fields.append(location[0])
    message = "Missing or invalid fields"
    if fields:
        message = f"{message}: {', '.join(fields)}"
    return error_response(400, message)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Store error on {request.method} {request.url.path}")
    return error_response(StoreError.status_code, StoreError.default_message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, "Internal server error")


# Serve frontend static files
static_dir = "/app/static"
# Check for local development path
if not os.path.exists(static_dir):
    local_static = os.path.join(os.path.dirname(os.path.dirname(__file__)), "..", "frontend", "dist")
    if os.path.exists(local_static):
        static_dir = local_static

if os.path.exists(f"{static_dir}/assets"):
    app.mount("/assets", StaticFiles(directory=f"{static_dir}/assets"), name="assets")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown page routes fall through to the SPA
    if (
        exc.status_code == 404
        and not request.url.path.startswith(settings.API_STR)
        and os.path.exists(f"{static_dir}/index.html")
    ):
        return FileResponse(f"{static_dir}/index.html")
    return error_response(exc.status_code, str(exc.detail))


# Include API router
app.include_router(api_router, prefix=settings.API_STR)

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
