import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .domain.catalog.router import router as catalog_router
from .domain.crew.router import router as crew_router
from .domain.invoicing.router import router as invoicing_router
from .domain.orders.router import router as orders_router
from .exceptions import ExternalServiceError
from .routes.admin import router as admin_router
from .routes.debug import router as debug_router
from .routes.upload import router as upload_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    missing = [
        name
        for name in (
            "NOTION_API_KEY",
            "NOTION_ORDERS_DB_ID",
            "NOTION_CLIENTS_DB_ID",
            "NOTION_TRUCK_MODELS_DB_ID",
            "NOTION_CREWS_DB_ID",
            "NOTION_PRICING_DB_ID",
            "CLERK_SECRET_KEY",
            "CLOUDINARY_CLOUD_NAME",
        )
        if not getattr(config, name)
    ]
    if missing:
        logger.warning(f"⚠️ Missing configuration: {', '.join(missing)}")
    if not config.CLERK_JWKS_URL:
        logger.warning("⚠️ CLERK_ISSUER/CLERK_JWKS_URL not set - every authenticated request will fail")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Glass Orders API", version="1.0.0", lifespan=lifespan)


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def _describe_validation_error(error: dict) -> str:
    """One readable line for a pydantic error, e.g. 'Missing clientId'"""
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
    field = ".".join(loc)
    message = error.get("msg", "Invalid value")

    if error.get("type") == "value_error":
        # Messages raised by our own validators are already user-facing
        return message.removeprefix("Value error, ")
    if error.get("type") == "missing":
        return f"Missing {field}" if field else "Missing request body"
    return f"{field}: {message}" if field else message


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Validation failures are reported as 400 with the first problem found"""
    errors = exc.errors()
    logger.warning(f"Validation error for {request.url.path}: {errors}")
    message = _describe_validation_error(errors[0]) if errors else "Invalid request"
    return error_response(400, message)


@app.exception_handler(ExternalServiceError)
async def external_service_exception_handler(request: Request, exc: ExternalServiceError):
    logger.error(f"❌ {exc.service} error on {request.method} {request.url.path}: {exc.message}")
    return error_response(500, exc.message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(500, "Internal server error")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    duration_ms = (time.time() - start) * 1000
    logger.info(f"{request.method} {request.url.path} - {response.status_code} ({duration_ms:.0f}ms)")
    return response


logger.info(f"CORS allowed origins: {config.ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(orders_router)
app.include_router(invoicing_router)
app.include_router(crew_router)
app.include_router(catalog_router)
app.include_router(upload_router)
app.include_router(admin_router)
app.include_router(debug_router)


@app.get("/")
def root():
    return {"message": "Glass Orders API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
