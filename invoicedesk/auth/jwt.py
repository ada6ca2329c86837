"""Verification of access tokens issued by the identity provider.

InvoiceDesk never signs tokens; sign-in and password resets stay with the
provider. Expected claims:
  - sub:    user ID
  - email:  user email (optional)
  - aud:    audience configured in settings (e.g. "authenticated")
  - exp:    expiry timestamp
"""

from jose import JWTError, jwt

from invoicedesk.config import settings


def decode_token(token: str) -> dict:
    """Decode and validate a JWT. Returns empty dict on failure."""
    try:
        return jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
        )
    except JWTError:
        return {}
