# ============================================================================
# Customer Service v1.0.0
# Monitoring API Endpoints - Operational Summary & Prometheus Scrape
# ============================================================================
#
# Endpoints:
#   GET /api/monitoring/summary    - Process and customer summary (ADMIN)
#   GET /api/monitoring/prometheus - Prometheus text exposition
#
# ============================================================================

import logging
import os
import time
from datetime import datetime, timezone

import psutil
from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.orm import Session

from app.auth.security import AuthenticatedUser, require_admin
from app.database.session import get_db
from app.observability.metrics import get_created_total
from services.customer_repository import CustomerRepository

logger = logging.getLogger(__name__)

router = APIRouter()

# Captured at import, which is process start for the API server
PROCESS_START_TIME = time.time()


def process_summary() -> dict:
    process = psutil.Process(os.getpid())
    memory_info = process.memory_info()
    cpu_times = process.cpu_times()

    return {
        "uptimeSeconds": time.time() - PROCESS_START_TIME,
        "cpuSeconds": cpu_times.user + cpu_times.system,
        "residentMemoryBytes": memory_info.rss,
        "threads": process.num_threads(),
    }


@router.get(
    "/summary",
    summary="Monitoring Summary",
    description=(
        "Process uptime, CPU time and resident memory together with the customer "
        "count, average age, age standard deviation and the number of customers "
        "created since start.\n\n"
        "**Authentication:** Bearer token with ADMIN role (SEC-005 otherwise)"
    ),
    tags=["Monitoring"]
)
def monitoring_summary(
    user: AuthenticatedUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> dict:
    repository = CustomerRepository(db)
    average_age = repository.average_age()
    age_standard_deviation = repository.age_standard_deviation()

    logger.info(f"[MONITORING] Summary requested | username={user.username}")
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "process": process_summary(),
        "customers": {
            "totalCustomers": repository.count(),
            "averageAge": average_age if average_age is not None else 0.0,
            "ageStandardDeviation": (
                age_standard_deviation if age_standard_deviation is not None else 0.0
            ),
            "createdSinceStart": get_created_total(),
        },
    }


@router.get(
    "/prometheus",
    summary="Prometheus Metrics",
    description="Exposes Prometheus metrics for observability.",
    tags=["Monitoring"]
)
def prometheus_metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
