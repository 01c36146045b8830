"""
============================================================================
Customer Service v1.0.0
Security Module - Password Hashing, JWT Issuance & Verification
============================================================================

Reliability Level: L5 High
Input Constraints: Username/password on login, Bearer token on API calls
Side Effects: None (pure verification, in-memory user store)

- Passwords are stored as bcrypt hashes only
- Tokens are HMAC-signed JWTs carrying subject, roles, iat and exp
- Every rejection carries an explicit error code

ERROR CODES:
    SEC-001: Missing Authorization header
    SEC-002: Invalid Authorization format
    SEC-003: Token invalid or expired
    SEC-004: Bad credentials
    SEC-005: Insufficient role

============================================================================
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import bcrypt
import jwt
from fastapi import Depends, Header

from services.service_config import ServiceConfig, get_service_config

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

BEARER_PREFIX = "Bearer "

ROLE_ADMIN = "ADMIN"
ROLE_USER = "USER"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class AuthErrorCode:
    """Authentication error codes for audit logging."""
    MISSING_HEADER = "SEC-001"
    INVALID_FORMAT = "SEC-002"
    INVALID_TOKEN = "SEC-003"
    BAD_CREDENTIALS = "SEC-004"
    FORBIDDEN = "SEC-005"


class AuthenticationError(Exception):
    """
    Raised when a caller can not be authenticated or authorised.

    Attributes:
        error_code: SEC-xxx code
        message: Human-readable reason
        status_code: HTTP status to surface (401 or 403)
    """

    def __init__(self, error_code: str, message: str, status_code: int = 401):
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{error_code}] {message}")


# ============================================================================
# PASSWORD HASHING
# ============================================================================

def hash_password(password: str, rounds: int = 12) -> str:
    """Hash ``password`` with bcrypt at the given cost."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt comparison."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# ============================================================================
# USER STORE
# ============================================================================

@dataclass
class UserAccount:
    username: str
    password_hash: str
    roles: List[str] = field(default_factory=list)


@dataclass
class AuthenticatedUser:
    """Identity extracted from a verified token."""
    username: str
    roles: List[str]

    def has_role(self, role: str) -> bool:
        return role in self.roles


class InMemoryUserStore:
    """
    Fixed set of accounts: ``admin`` (ADMIN, USER) and ``user`` (USER).

    Passwords come from configuration and are hashed once on construction.
    """

    def __init__(self, config: ServiceConfig):
        self._users: Dict[str, UserAccount] = {
            "admin": UserAccount(
                username="admin",
                password_hash=hash_password(config.admin_password, config.bcrypt_rounds),
                roles=[ROLE_ADMIN, ROLE_USER],
            ),
            "user": UserAccount(
                username="user",
                password_hash=hash_password(config.user_password, config.bcrypt_rounds),
                roles=[ROLE_USER],
            ),
        }

    def authenticate(self, username: str, password: str) -> UserAccount:
        """
        Raises:
            AuthenticationError: SEC-004 on unknown user or wrong password
        """
        account = self._users.get(username)
        if account is None or not verify_password(password, account.password_hash):
            logger.warning(
                f"[{AuthErrorCode.BAD_CREDENTIALS}] Authentication failed | username={username}"
            )
            raise AuthenticationError(AuthErrorCode.BAD_CREDENTIALS, "Invalid username or password")
        return account


_user_store: Optional[InMemoryUserStore] = None
_user_store_lock = threading.Lock()


def get_user_store() -> InMemoryUserStore:
    """Lazily build the global user store (hashing is deliberately slow)."""
    global _user_store
    with _user_store_lock:
        if _user_store is None:
            _user_store = InMemoryUserStore(get_service_config())
    return _user_store


def reset_user_store() -> None:
    global _user_store
    with _user_store_lock:
        _user_store = None


# ============================================================================
# JWT
# ============================================================================

def create_access_token(
    username: str,
    roles: List[str],
    config: Optional[ServiceConfig] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Issue a signed JWT for ``username``.

    Args:
        username: Token subject
        roles: Granted roles
        config: Service configuration (defaults to the global one)
        now: Issue time (defaults to current UTC time)
    """
    config = config or get_service_config()
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "roles": list(roles),
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=config.jwt_expiration_minutes),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: Optional[ServiceConfig] = None) -> AuthenticatedUser:
    """
    Verify signature and expiry of ``token``.

    Raises:
        AuthenticationError: SEC-003 if the token is invalid or expired
    """
    config = config or get_service_config()
    try:
        payload = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(AuthErrorCode.INVALID_TOKEN, "Token has expired")
    except jwt.PyJWTError as e:
        raise AuthenticationError(AuthErrorCode.INVALID_TOKEN, f"Invalid token: {e}")

    username = payload.get("sub")
    if not username:
        raise AuthenticationError(AuthErrorCode.INVALID_TOKEN, "Token has no subject")

    return AuthenticatedUser(username=username, roles=list(payload.get("roles", [])))


# ============================================================================
# FASTAPI DEPENDENCIES
# ============================================================================

def get_current_user(
    authorization: Optional[str] = Header(None, description="Bearer token")
) -> AuthenticatedUser:
    """
    Resolve the caller from the ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: SEC-001 / SEC-002 / SEC-003
    """
    if not authorization:
        raise AuthenticationError(
            AuthErrorCode.MISSING_HEADER,
            "Authorization header required. Use: Bearer <token>"
        )

    if not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError(
            AuthErrorCode.INVALID_FORMAT,
            "Invalid authorization format. Use: Bearer <token>"
        )

    token = authorization[len(BEARER_PREFIX):].strip()
    return decode_access_token(token)


def require_admin(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    """
    Raises:
        AuthenticationError: SEC-005 (403) when the caller is not an admin
    """
    if not user.has_role(ROLE_ADMIN):
        logger.warning(
            f"[{AuthErrorCode.FORBIDDEN}] Admin role required | username={user.username}"
        )
        raise AuthenticationError(AuthErrorCode.FORBIDDEN, "Admin role required", status_code=403)
    return user
