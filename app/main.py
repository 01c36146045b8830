"""
============================================================================
Customer Service v1.0.0
FastAPI Application Entry Point
============================================================================

Reliability Level: L5 High
Input Constraints: JSON over HTTP, Bearer JWT on customer endpoints
Side Effects: Database writes, RabbitMQ publishes, Prometheus metrics

STARTUP:
    - Load and validate configuration (CFG-001 aborts startup)
    - Create the customers table if missing
    - Verify database connectivity (aborts startup on failure)
    - Probe the message broker (non-blocking)

SHUTDOWN:
    - Close the broker connection
    - Dispose database connections

============================================================================
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from app.api import include_api_routers, register_exception_handlers
from app.database.session import check_database_connection, engine, init_db
from app.messaging.producer import check_broker_connection, shutdown_message_producer
from services.service_config import get_service_config

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# ============================================================================
# APPLICATION LIFESPAN
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup/shutdown events.

    Reliability Level: L5 High
    Input Constraints: None
    Side Effects: Schema creation, connection checks
    """
    logger.info("=" * 60)
    logger.info(f"CUSTOMER SERVICE v{VERSION}")
    logger.info("=" * 60)
    logger.info(f"Startup Time: {datetime.now(timezone.utc).isoformat()}")

    config = get_service_config()
    logger.info(
        f"[OK] Configuration loaded | exchange={config.customer_exchange} | "
        f"notifications_enabled={config.notifications_enabled}"
    )

    try:
        init_db()
        check_database_connection()
        logger.info("[OK] Database connection verified")
    except Exception as e:
        logger.critical(f"[CRITICAL] Database connection failed: {e}")
        logger.critical("[CRITICAL] Service cannot start without database connectivity")
        raise

    if config.notifications_enabled:
        try:
            check_broker_connection(config)
            logger.info(f"[OK] Message broker reachable | host={config.rabbitmq_host}")
        except ConnectionError as e:
            logger.warning(f"[WARN] Message broker unreachable: {e}")
            logger.warning("       Customers will be stored; notifications will fail (CUS-006)")
    else:
        logger.info("[INFO] Customer notifications disabled")

    yield

    logger.info("CUSTOMER SERVICE - SHUTDOWN INITIATED")
    shutdown_message_producer()
    engine.dispose()
    logger.info("[OK] Database connections closed")


# ============================================================================
# FASTAPI APPLICATION
# ============================================================================

app = FastAPI(
    title="Customer Service",
    description=(
        "Customer record microservice.\n\n"
        "CRUD over customers, age metrics, life-expectancy estimates and "
        "`customer.created` notifications over RabbitMQ.\n\n"
        "**Authentication:** `POST /api/auth/login`, then `Authorization: Bearer <token>`"
    ),
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


# ============================================================================
# MIDDLEWARE
# ============================================================================

# CORS middleware (restrict in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


# ============================================================================
# EXCEPTION HANDLERS & ROUTERS
# ============================================================================

register_exception_handlers(app)
include_api_routers(app)


# ============================================================================
# SYSTEM ENDPOINTS
# ============================================================================

@app.get(
    "/",
    summary="System Status",
    description="Returns the service name, version and current time.",
    tags=["System"]
)
async def root():
    return {
        "service": "customer-service",
        "version": VERSION,
        "status": "running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get(
    "/health",
    summary="Health Check",
    description=(
        "Database and message broker status. Returns 503 only when the "
        "database is unreachable."
    ),
    tags=["System"]
)
def health_check():
    """
    Health check endpoint.

    Reliability Level: STANDARD
    Input Constraints: None
    Side Effects: Database ping, broker connection attempt
    """
    body = {"status": "healthy", "database": "connected"}
    status_code = 200

    try:
        check_database_connection()
    except ConnectionError as e:
        body.update(status="unhealthy", database="disconnected", error=str(e))
        status_code = 503

    config = get_service_config(validate=False)
    if not config.notifications_enabled:
        body["broker"] = "disabled"
    else:
        try:
            check_broker_connection(config)
            body["broker"] = "connected"
        except ConnectionError as e:
            body["broker"] = "disconnected"
            body["broker_error"] = str(e)

    return JSONResponse(status_code=status_code, content=body)


@app.get(
    "/metrics",
    summary="Prometheus Metrics",
    description="Exposes Prometheus metrics for observability.",
    tags=["Observability"]
)
async def metrics():
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
