"""Authentication: static bearer token validation and request token extraction."""
import hmac
import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings
from services.exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme. auto_error is off so a missing header reaches the
# auth service and fails there with the same error as an invalid token.
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The identified caller behind a bearer token."""

    username: str


class AuthService:
    """
    Validates bearer tokens against a single accepted value.

    Stand-in for a real identity provider: there is no expiry, rotation, or
    user store. The principal is recomputed for every call.
    """

    def __init__(self, accepted_token: str, username: str) -> None:
        self._accepted_token = accepted_token
        self._principal = Principal(username=username)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthService":
        """Build the service from application settings."""
        return cls(accepted_token=settings.auth_token, username=settings.auth_username)

    async def authenticate(self, token: str | None) -> Principal:
        """
        Resolve a token to its principal.

        Raises:
            UnauthenticatedError: If the token is empty or not the accepted value.
        """
        if not token:
            raise UnauthenticatedError("No token provided")
        if not hmac.compare_digest(token.encode(), self._accepted_token.encode()):
            logger.debug("Rejected bearer token (length %d)", len(token))
            raise UnauthenticatedError("Invalid token")
        return self._principal


def get_auth_service(request: Request) -> AuthService:
    """Dependency returning the auth service built at application startup."""
    return request.app.state.auth_service


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Dependency returning the request's bearer token, or an empty string."""
    if credentials is None:
        return ""
    return credentials.credentials
