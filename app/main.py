# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the RangeOps API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    RangeOpsException,
    database_exception_handler,
    rangeops_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    break_room,
    bulletin,
    calendar,
    certifications,
    checkout,
    devices,
    employees,
    firearms,
    health,
    notifications,
    operations,
    sales,
    schedules,
    tasks,
    time_off,
    timesheets,
)
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the runtime configuration on startup and a marker on shutdown.
    The Supabase client is created lazily on first use.
    """
    logger.info(f"Starting RangeOps API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Business timezone: {settings.BUSINESS_TIMEZONE}")
    if not settings.stripe_configured:
        logger.warning("STRIPE_SECRET_KEY not set; checkout endpoints will return 503")
    if not settings.email_configured:
        logger.warning("RESEND_API_KEY not set; emails will be skipped")

    yield

    logger.info("Shutting down RangeOps API")


# Create FastAPI application
app = FastAPI(
    title="RangeOps API",
    description="""
## Business Operations API for a Retail Gun Range

Staff scheduling, time off, certifications, sales reporting, bulletins and
class checkout, backed by Supabase.

### Authentication

Every endpoint except health checks and the Stripe webhook expects a
Supabase access token:

```bash
curl http://localhost:8000/api/v1/employees/me \\
  -H "Authorization: Bearer $SUPABASE_ACCESS_TOKEN"
```

Admin endpoints additionally require the `admin`, `super admin` or `dev` role.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Verify tokens and read the caller's profile"},
        {"name": "Employees", "description": "Employee lookups and profile updates"},
        {"name": "Schedules", "description": "Shifts, attendance and schedule generation"},
        {"name": "Time Off", "description": "Time off requests and reviews"},
        {"name": "Certifications", "description": "Employee certifications and expirations"},
        {"name": "Sales", "description": "Sales reports"},
        {"name": "Bulletin", "description": "Announcements and acknowledgments"},
        {"name": "Devices", "description": "Approved handgun roster"},
        {"name": "Checkout", "description": "Stripe class checkout and webhooks"},
        {"name": "Operations", "description": "Deposits, range walks and holidays"},
        {"name": "Notifications", "description": "Templated staff emails"},
        {"name": "Tasks", "description": "Track background task progress"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(RangeOpsException)
async def handle_rangeops_exception(request: Request, exc: RangeOpsException):
    """Handle custom RangeOps exceptions."""
    return await rangeops_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    return await validation_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_database_exception(request: Request, exc: SupabaseClientError):
    """Handle wrapped database errors."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return await database_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(auth_routes.router, prefix="/api/v1/auth", tags=["Auth"])

# Health check endpoints
app.include_router(health.router, prefix="/api/v1", tags=["Health"])

# Staff
app.include_router(employees.router, prefix="/api/v1/employees", tags=["Employees"])
app.include_router(schedules.router, prefix="/api/v1/schedules", tags=["Schedules"])
app.include_router(time_off.router, prefix="/api/v1/time-off", tags=["Time Off"])
app.include_router(timesheets.router, prefix="/api/v1/timesheets", tags=["Timesheets"])
app.include_router(calendar.router, prefix="/api/v1/calendar", tags=["Calendar"])
app.include_router(
    certifications.router,
    prefix="/api/v1/certifications",
    tags=["Certifications"]
)
app.include_router(bulletin.router, prefix="/api/v1/bulletin", tags=["Bulletin"])

# Reporting
app.include_router(sales.router, prefix="/api/v1/sales", tags=["Sales"])
app.include_router(devices.router, prefix="/api/v1/approved-devices", tags=["Devices"])

# Customers
app.include_router(checkout.router, prefix="/api/v1/checkout", tags=["Checkout"])

# Daily operations (/deposits, /range-walks, /range-repairs, /holidays)
app.include_router(operations.router, prefix="/api/v1", tags=["Operations"])
app.include_router(break_room.router, prefix="/api/v1/break-room-duty", tags=["Break Room"])
app.include_router(
    firearms.router,
    prefix="/api/v1/firearms-maintenance",
    tags=["Firearms"]
)

# Email
app.include_router(
    notifications.router,
    prefix="/api/v1/notifications",
    tags=["Notifications"]
)

# Task status endpoints
app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["Tasks"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "RangeOps API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
