import secrets
import time
from datetime import timedelta
from typing import Callable, Optional

from jose import jwt
from pydantic import ValidationError

from ..models.token import TokenClaims
from .config import (
    ACCESS_TOKEN_LIFETIME,
    AUTHORIZATION_CODE_LIFETIME,
    REFRESH_TOKEN_LIFETIME,
)

JWT_ALGORITHM = "HS256"


def generate_signing_key() -> bytes:
    """Generate a fresh symmetric signing key"""
    return secrets.token_bytes(32)


class TokenCodec:
    """
    Issues and verifies signed, time-bounded tokens.

    Every token carries the client id and redirect uri it was minted for,
    a unique ``jti`` and ``iat``/``exp`` timestamps. Authorization codes,
    access tokens and refresh tokens share this shape and differ only in
    lifetime. The key lives only on the instance; build one codec per token
    class to give each class its own key.
    """

    def __init__(self, key: Optional[bytes] = None, clock: Callable[[], float] = time.time):
        self._key = key or generate_signing_key()
        self._clock = clock

    def __repr__(self) -> str:
        return f"<TokenCodec {JWT_ALGORITHM}>"

    def now(self) -> int:
        """Current time in whole epoch seconds"""
        return int(self._clock())

    def mint(self, client_id: str, redirect_uri: str, lifetime: timedelta) -> str:
        """Create a signed token for a client/redirect pair valid for ``lifetime``"""
        seconds = int(lifetime.total_seconds())
        if seconds <= 0:
            raise ValueError("Token lifetime must be positive")

        issued_at = self.now()
        to_encode = {
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "jti": secrets.token_urlsafe(16),
            "iat": issued_at,
            "exp": issued_at + seconds,
        }
        return jwt.encode(to_encode, self._key, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> Optional[TokenClaims]:
        """
        Return the claims of a valid token, or None.

        Bad signatures, malformed tokens, missing claims and expired tokens
        are all reported the same way.
        """
        if not isinstance(token, str) or not token:
            return None

        try:
            # Expiry is checked below against the codec clock, strictly
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[JWT_ALGORITHM],
                options={"verify_exp": False},
            )
            claims = TokenClaims.model_validate(payload)
        except (jwt.JWTError, ValidationError):
            return None

        if claims.expires_at <= claims.issued_at or self.now() >= claims.expires_at:
            return None
        return claims

    def issue_authorization_code(self, client_id: str, redirect_uri: str) -> str:
        return self.mint(client_id, redirect_uri, AUTHORIZATION_CODE_LIFETIME)

    def issue_access_token(self, client_id: str, redirect_uri: str) -> str:
        return self.mint(client_id, redirect_uri, ACCESS_TOKEN_LIFETIME)

    def issue_refresh_token(self, client_id: str, redirect_uri: str) -> str:
        return self.mint(client_id, redirect_uri, REFRESH_TOKEN_LIFETIME)
