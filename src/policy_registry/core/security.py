"""JWT helpers backing the authentication gate."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from attrs import field, frozen
from beartype import beartype

from .config import Settings, get_settings


@frozen
class TokenPayload:
    """Immutable JWT token payload."""

    sub: str = field()  # Subject (user ID)
    exp: datetime = field()  # Expiration time
    iat: datetime | None = field(default=None)  # Issued at time
    email: str | None = field(default=None)
    role: str | None = field(default=None)


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be trusted."""


class Security:
    """Encode and decode access tokens with the configured secret."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize security utilities."""
        settings = settings or get_settings()
        self._jwt_secret = settings.jwt_secret
        self._jwt_algorithm = settings.jwt_algorithm
        self._jwt_audience = settings.jwt_audience
        self._jwt_expiration_minutes = settings.jwt_expiration_minutes

    @beartype
    def create_access_token(
        self,
        subject: str,
        email: str | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create JWT access token."""
        now = datetime.now(timezone.utc)
        if expires_delta is None:
            expires_delta = timedelta(minutes=self._jwt_expiration_minutes)

        payload = {
            "sub": subject,
            "exp": now + expires_delta,
            "iat": now,
            "jti": str(uuid.uuid4()),
            "role": "authenticated",
        }
        if email is not None:
            payload["email"] = email
        if self._jwt_audience is not None:
            payload["aud"] = self._jwt_audience

        return jwt.encode(payload, self._jwt_secret, algorithm=self._jwt_algorithm)

    @beartype
    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate JWT token.

        Raises:
            InvalidTokenError: If the signature, expiry, audience or subject
                is missing or wrong.
        """
        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=[self._jwt_algorithm],
                audience=self._jwt_audience,
                options={
                    "require": ["exp", "sub"],
                    "verify_aud": self._jwt_audience is not None,
                },
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("Token subject is missing")

        issued = payload.get("iat")
        return TokenPayload(
            sub=subject,
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(issued, tz=timezone.utc) if issued else None,
            email=payload.get("email"),
            role=payload.get("role"),
        )


# Global security instance
_security: Security | None = None


@beartype
def get_security() -> Security:
    """Get global security instance."""
    global _security
    if _security is None:
        _security = Security()
    return _security


@beartype
def reset_security() -> None:
    """Forget the global instance (for testing)."""
    global _security
    _security = None
