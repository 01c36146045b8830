# ============================================================================
# Customer Service v1.0.0
# Auth API Endpoints - JWT Login
# ============================================================================
#
# Endpoints:
#   POST /api/auth/login - Exchange username/password for a Bearer JWT
#
# Error Codes:
#   SEC-004: Invalid username or password (401)
#
# ============================================================================

import logging

from fastapi import APIRouter

from app.auth.security import create_access_token, get_user_store
from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.customer import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login",
    description="Verifies credentials against the in-memory accounts and issues a signed JWT.",
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials (SEC-004)"}},
    tags=["Auth"]
)
def login(request: LoginRequest) -> LoginResponse:
    account = get_user_store().authenticate(request.username, request.password)
    token = create_access_token(account.username, account.roles)

    logger.info(f"[AUTH-API] Login succeeded | username={account.username} | roles={account.roles}")
    return LoginResponse(token=token, token_type="Bearer")
