# ============================================================================
# Customer Service v1.0.0
# API Error Handling - Exception to HTTP Mapping
# ============================================================================
#
# Reliability Level: L5 High
# Purpose: Translate domain and security errors into the JSON error body
#
# Error body:
#   {"status", "error_code", "message", "timestamp", "errors"?}
#
# Mapping:
#   CUS-001 CustomerValidationError   -> 400 (with field errors)
#   CUS-001 RequestValidationError    -> 400 (malformed body or path)
#   CUS-002 CustomerNotFoundError     -> 404
#   CUS-003 CustomerStorageError      -> 500
#   SEC-00x AuthenticationError       -> 401 / 403
#   SYS-500 any other exception       -> 500
#
# ============================================================================

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.auth.security import AuthenticationError
from services.customer_errors import (
    CustomerErrorCode,
    CustomerNotFoundError,
    CustomerStorageError,
    CustomerValidationError,
)

logger = logging.getLogger(__name__)

SYSTEM_ERROR_CODE = "SYS-500"


def create_error_response(
    error_code: str,
    message: str,
    status_code: int = 400,
    errors: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """
    Create standardized error response.

    Reliability Level: STANDARD
    Input Constraints: Error code, message, optional field errors
    Side Effects: None

    Returns:
        JSONResponse: Formatted error response
    """
    content = {
        "status": status_code,
        "error_code": error_code,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
    if errors:
        content["errors"] = errors

    return JSONResponse(status_code=status_code, content=content)


def _field_name(loc) -> str:
    # loc looks like ("body", "firstName") or ("path", "customer_id")
    parts = [str(p) for p in loc if p not in ("body", "path", "query", "header")]
    return ".".join(parts) or "body"


def validation_errors_from_request(exc: RequestValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(error.get("loc", ())), error.get("msg", "is invalid"))
    return errors


# ============================================================================
# HANDLERS
# ============================================================================

async def customer_validation_handler(request: Request, exc: CustomerValidationError):
    logger.warning(f"[{exc.error_code}] {exc.message} | path={request.url.path} | fields={sorted(exc.errors)}")
    return create_error_response(exc.error_code, exc.message, 400, exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = validation_errors_from_request(exc)
    logger.warning(
        f"[{CustomerErrorCode.VALIDATION_FAILED}] Malformed request | "
        f"path={request.url.path} | fields={sorted(errors)}"
    )
    return create_error_response(
        CustomerErrorCode.VALIDATION_FAILED,
        "Validation failed",
        400,
        errors,
    )


async def customer_not_found_handler(request: Request, exc: CustomerNotFoundError):
    logger.info(f"[{exc.error_code}] {exc.message} | path={request.url.path}")
    return create_error_response(exc.error_code, exc.message, 404)


async def customer_storage_handler(request: Request, exc: CustomerStorageError):
    logger.error(f"[{exc.error_code}] {exc.message} | path={request.url.path}")
    return create_error_response(
        exc.error_code,
        "Customer storage is unavailable. This incident has been logged.",
        500,
    )


async def authentication_handler(request: Request, exc: AuthenticationError):
    logger.warning(f"[{exc.error_code}] {exc.message} | path={request.url.path}")
    return create_error_response(exc.error_code, exc.message, exc.status_code)


async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors.

    Reliability Level: L5 High
    Input Constraints: Any unhandled exception
    Side Effects: Logs error, returns safe response
    """
    logger.exception(f"[{SYSTEM_ERROR_CODE}] Unhandled exception: {exc} | path={request.url.path}")
    return create_error_response(
        SYSTEM_ERROR_CODE,
        "Internal server error. This incident has been logged.",
        500,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CustomerValidationError, customer_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(CustomerNotFoundError, customer_not_found_handler)
    app.add_exception_handler(CustomerStorageError, customer_storage_handler)
    app.add_exception_handler(AuthenticationError, authentication_handler)
    app.add_exception_handler(Exception, global_exception_handler)
