"""FastAPI dependencies for authentication.

Dependencies:
  get_current_user  → verify the bearer token, return AuthUser
"""

from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from invoicedesk.auth.jwt import decode_token
from invoicedesk.config import settings
from invoicedesk.middleware.exceptions import AuthenticationError

bearer_scheme = HTTPBearer(auto_error=False)

LOCAL_USER_ID = "local-user"


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str | None = None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthUser:
    """Return the signed-in user from the provider's access token.

    With auth disabled (local development) every request runs as a fixed
    local user.
    """
    if not settings.auth_enabled:
        return AuthUser(id=LOCAL_USER_ID)

    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_token(credentials.credentials)
    user_id: str | None = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid or expired token")

    return AuthUser(id=user_id, email=payload.get("email"))
