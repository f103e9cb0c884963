"""
Marketplace Settlement - Main FastAPI Application.

REST API over the order-settlement core: checkout, order lifecycle,
courier operations, customer insights and recurring billing.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time

from api.dependencies import get_container
from api.routes import customers, health, orders, subscriptions


# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)s | %(name)s | %(message)s'
)
logger = logging.getLogger(__name__)


# =============================================================================
# LIFESPAN (startup / shutdown)
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize storage and own the renewal scheduler for the process lifetime."""
    logger.info("🚀 Marketplace API starting up...")
    container = get_container()

    if container.settings.database.uses_sql:
        from core.infrastructure.database.config import init_database

        await init_database()

    if container.settings.renewal.enabled:
        container.renewal_scheduler.start()
    else:
        logger.info("Renewal scheduler disabled")

    yield

    await container.renewal_scheduler.stop()
    if container.settings.database.uses_sql:
        from core.infrastructure.database.config import close_database

        await close_database()
    logger.info("👋 Marketplace API shutting down...")


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Marketplace Settlement API",
    description="""
    Multi-vendor order settlement.

    Features:
    - Checkout with commission snapshots and inventory reservation
    - Order status lifecycle with inventory restoration
    - Courier consignments with local fallback
    - Recurring subscription billing
    - Customer risk insights
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()

    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"← {request.method} {request.url.path} "
        f"[{response.status_code}] ({duration:.3f}s)"
    )

    return response


# =============================================================================
# GLOBAL EXCEPTION HANDLER
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "path": request.url.path
        }
    )


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(
    health.router,
    tags=["Health"]
)

app.include_router(
    orders.router,
    prefix="/api/v1/orders",
    tags=["Orders"]
)

app.include_router(
    customers.router,
    prefix="/api/v1/customers",
    tags=["Customers"]
)

app.include_router(
    subscriptions.router,
    prefix="/api/v1/subscriptions",
    tags=["Subscriptions"]
)


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """API root endpoint."""
    return {
        "message": "Marketplace Settlement API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
