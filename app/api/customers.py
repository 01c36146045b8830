# ============================================================================
# Customer Service v1.0.0
# Customer API Endpoints - CRUD, Life Expectancy & Metrics
# ============================================================================
#
# Reliability Level: L5 High
# Purpose: HTTP surface of the customer record service
#
# Endpoints:
#   POST   /api/customers           - Create customer (201)
#   GET    /api/customers           - All customers with life expectancy
#   GET    /api/customers/metrics   - Age metrics
#   GET    /api/customers/{id}      - Single customer
#   PUT    /api/customers/{id}      - Update customer
#   DELETE /api/customers/{id}      - Delete customer (204)
#
# Authentication:
#   - Every endpoint requires a Bearer JWT (SEC-001..SEC-003)
#
# Error Codes:
#   CUS-001: Validation failed (400)
#   CUS-002: Customer not found (404)
#   CUS-003: Storage failure (500)
#
# ============================================================================

import logging
from typing import List

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session

from app.auth.security import AuthenticatedUser, get_current_user
from app.database.session import get_db
from app.messaging.producer import get_message_producer
from app.schemas.customer import (
    CustomerDetailOut,
    CustomerIn,
    CustomerMetricsOut,
    CustomerOut,
    ErrorResponse,
)
from services.customer_repository import CustomerRepository
from services.customer_service import CustomerNotificationPublisher, CustomerService

logger = logging.getLogger(__name__)

# ============================================================================
# Router
# ============================================================================

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation failed (CUS-001)"},
    401: {"model": ErrorResponse, "description": "Missing or invalid token (SEC-001..003)"},
    500: {"model": ErrorResponse, "description": "Storage failure (CUS-003)"},
}

NOT_FOUND_RESPONSE = {
    404: {"model": ErrorResponse, "description": "Customer not found (CUS-002)"},
}


# ============================================================================
# Dependencies
# ============================================================================

def get_customer_publisher() -> CustomerNotificationPublisher:
    return get_message_producer()


def get_customer_service(
    db: Session = Depends(get_db),
    publisher: CustomerNotificationPublisher = Depends(get_customer_publisher),
) -> CustomerService:
    """Build a request-scoped service over the request's session."""
    return CustomerService(CustomerRepository(db), publisher)


# ============================================================================
# Endpoints
# ============================================================================

@router.post(
    "",
    response_model=CustomerOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Customer",
    description=(
        "Validates and stores a new customer, then publishes a "
        "`customer.created` notification.\n\n"
        "A notification failure is logged (CUS-006) and does not fail the request."
    ),
    responses=ERROR_RESPONSES,
    tags=["Customers"]
)
def create_customer(
    payload: CustomerIn = Body(...),
    user: AuthenticatedUser = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerOut:
    logger.info(f"[CUSTOMER-API] POST /api/customers | username={user.username}")
    return CustomerOut.from_view(service.create(payload.to_input()))


@router.get(
    "",
    response_model=List[CustomerDetailOut],
    summary="List Customers",
    description="Returns every customer with its estimated life expectancy.",
    responses=ERROR_RESPONSES,
    tags=["Customers"]
)
def list_customers(
    user: AuthenticatedUser = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
) -> List[CustomerDetailOut]:
    logger.info(f"[CUSTOMER-API] GET /api/customers | username={user.username}")
    return [CustomerDetailOut.from_detail(view) for view in service.list_all_with_life_expectancy()]


@router.get(
    "/metrics",
    response_model=CustomerMetricsOut,
    summary="Customer Metrics",
    description="Average, sample standard deviation, count, minimum and maximum of ages.",
    responses=ERROR_RESPONSES,
    tags=["Customers"]
)
def customer_metrics(
    user: AuthenticatedUser = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerMetricsOut:
    logger.info(f"[CUSTOMER-API] GET /api/customers/metrics | username={user.username}")
    return CustomerMetricsOut.from_metrics(service.compute_metrics())


@router.get(
    "/{customer_id}",
    response_model=CustomerOut,
    summary="Get Customer",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    tags=["Customers"]
)
def get_customer(
    customer_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerOut:
    logger.info(
        f"[CUSTOMER-API] GET /api/customers/{customer_id} | username={user.username}"
    )
    return CustomerOut.from_view(service.get_by_id(customer_id))


@router.put(
    "/{customer_id}",
    response_model=CustomerOut,
    summary="Update Customer",
    description="Replaces names, age and date of birth. The id and creation time are kept.",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    tags=["Customers"]
)
def update_customer(
    customer_id: int,
    payload: CustomerIn = Body(...),
    user: AuthenticatedUser = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerOut:
    logger.info(
        f"[CUSTOMER-API] PUT /api/customers/{customer_id} | username={user.username}"
    )
    return CustomerOut.from_view(service.update(customer_id, payload.to_input()))


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Customer",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    tags=["Customers"]
)
def delete_customer(
    customer_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
) -> Response:
    logger.info(
        f"[CUSTOMER-API] DELETE /api/customers/{customer_id} | username={user.username}"
    )
    service.delete(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
