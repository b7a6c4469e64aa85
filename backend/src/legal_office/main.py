"""
Main FastAPI application for the Legal Office backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import time

from legal_office.core.config import get_config
from legal_office.core.database import check_database_connection
from legal_office.core.exceptions import LegalOfficeException
from legal_office.core.logging_config import configure_logging
from legal_office.core.messages import message_for_status
from legal_office.core.response_utils import create_success_response, error_json_response, ResponseTimer
from legal_office.schemas import StandardResponse, HealthCheckResponse
from legal_office.api.v1 import (
    auth, users, clients, cases, appointments, documents, invoices, dashboard, assistant, prompts,
)

config = get_config()
configure_logging(config.application.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info(f"Starting {config.application.app_name} ({config.application.environment})...")
    try:
        from legal_office.core.database import initialize_database
        initialize_database()
        logger.info("Database initialization completed")
    except Exception as e:
        logger.warning(f"Database initialization failed during startup: {e}")
        logger.info("Application will continue - database will be initialized on first access")

    if not config.ai.glm_api_key and not config.ai.gemini_api_key:
        logger.warning("No AI provider key in the environment; admins must save one in the AI settings")

    logger.info("Application startup completed successfully")

    yield

    # Shutdown
    logger.info(f"Shutting down {config.application.app_name}...")


# Create FastAPI application
app = FastAPI(
    title=config.application.app_name,
    description=config.application.app_description,
    version=config.application.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.application.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    start_time = time.time()

    logger.info(f"Request: {request.method} {request.url}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"Response: {request.method} {request.url.path} {response.status_code} - {process_time:.3f}s")

    return response


# Domain exception handler
@app.exception_handler(LegalOfficeException)
async def legal_office_exception_handler(request: Request, exc: LegalOfficeException):
    """Business errors keep their status; the Arabic message depends on it."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{type(exc).__name__}: {exc.status_code} - {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return error_json_response(
        message=exc.user_message or message_for_status(exc.status_code),
        status_code=exc.status_code,
        errors=[exc.message],
        additional_details=exc.details or None,
        headers=headers,
    )


# HTTPException handler
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """HTTP exception handler."""
    logger.warning(f"HTTP exception: {exc.status_code} - {exc.detail}")
    return error_json_response(
        message=message_for_status(exc.status_code),
        status_code=exc.status_code,
        errors=[str(exc.detail)],
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    ]
    logger.warning(f"Validation failed for {request.method} {request.url.path}: {errors}")
    return error_json_response(message=message_for_status(422), status_code=422, errors=errors)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return error_json_response(
        message=message_for_status(500),
        status_code=500,
        errors=["Internal server error"],
    )


# Health check endpoint
def health_check():
    """Application health check."""
    with ResponseTimer() as timer:
        database_ok = check_database_connection()
        health_data = HealthCheckResponse(
            status="healthy" if database_ok else "degraded",
            version=config.application.app_version,
            environment=config.application.environment,
            database=database_ok,
        )

        return create_success_response(
            data=health_data,
            status_code=200,
            execution_time=timer.get_execution_time()
        )


API_ROOT = config.application.api_root_path.rstrip("/")

app.add_api_route("/health", health_check, methods=["GET"], response_model=StandardResponse, tags=["Health"])
if API_ROOT:
    app.add_api_route(f"{API_ROOT}/health", health_check, methods=["GET"], response_model=StandardResponse,
                      tags=["Health"], include_in_schema=False)

# Include API routers
app.include_router(auth.router, prefix=f"{API_ROOT}/auth", tags=["Authentication"])
app.include_router(users.router, prefix=f"{API_ROOT}/users", tags=["Users"])
app.include_router(clients.router, prefix=f"{API_ROOT}/clients", tags=["Clients"])
app.include_router(cases.router, prefix=f"{API_ROOT}/cases", tags=["Cases"])
app.include_router(appointments.router, prefix=f"{API_ROOT}/appointments", tags=["Appointments"])
app.include_router(documents.router, prefix=f"{API_ROOT}/documents", tags=["Documents"])
app.include_router(invoices.router, prefix=f"{API_ROOT}/invoices", tags=["Invoices"])
app.include_router(dashboard.router, prefix=f"{API_ROOT}/dashboard", tags=["Dashboard"])
app.include_router(assistant.router, prefix=f"{API_ROOT}/assistant", tags=["Legal Assistant"])
app.include_router(prompts.router, prefix=f"{API_ROOT}/prompts", tags=["Prompts"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "legal_office.main:app",
        host=config.application.api_host,
        port=config.application.api_port,
        reload=config.application.debug,
        log_level=config.application.debug and "debug" or "info"
    )
