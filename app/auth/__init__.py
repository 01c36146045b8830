# ============================================================================
# Customer Service v1.0.0
# Authentication & Security Module
# ============================================================================

from app.auth.security import (
    AuthenticationError,
    AuthenticatedUser,
    get_current_user,
    require_admin,
)

__all__ = ["AuthenticationError", "AuthenticatedUser", "get_current_user", "require_admin"]
