from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials
from typing import Optional

from ..core.exceptions import AuthenticationError, AuthorizationError
from ..core.security import AuthContext, UserRole, security, verify_token
from ..schemas.common import MAX_PAGE


async def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthContext:
    """Extract and verify the bearer token from the Authorization header."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Access token is required")

    return verify_token(credentials.credentials)


# Role-based access control dependencies
def require_roles(*allowed_roles: UserRole):
    """Create a dependency that requires one of the given roles."""
    async def role_checker(
        actor: AuthContext = Depends(get_auth_context)
    ) -> AuthContext:
        if actor.role not in allowed_roles:
            raise AuthorizationError(
                f"Access denied. Required roles: {', '.join(role.value for role in allowed_roles)}. "
                f"Your role: {actor.role.value}"
            )
        return actor

    return role_checker


get_doctor = require_roles(UserRole.DOCTOR)
get_patient = require_roles(UserRole.PATIENT)
get_doctor_or_patient = require_roles(UserRole.DOCTOR, UserRole.PATIENT)


class Pagination:
    """Validated 1-based page/limit query parameters."""

    def __init__(
        self,
        page: int = Query(1, ge=1, le=MAX_PAGE, description="1-based page number"),
        limit: int = Query(10, ge=1, le=100, description="Items per page"),
    ):
        self.page = page
        self.limit = limit
