"""JWT issuing and validation.

Tokens are HS512-signed JWTs whose ``sub`` claim is the user ID as a
string. There is no refresh and no revocation: a token is valid until
its ``exp``.
"""
import logging
from datetime import datetime, timedelta, timezone

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

from ... import config
from ...exceptions import (
    TokenExpiredError,
    TokenMalformedError,
    TokenSignatureError,
    TokenUnsupportedError,
)

logger = logging.getLogger(__name__)


class TokenProvider:
    """Issues and validates signed access tokens.

    Examples:
        >>> provider = TokenProvider(secret, expiration_ms=60_000)
        >>> token = provider.issue_token(42)
        >>> provider.validate_token(token)
        42
    """

    def __init__(self, secret: str, expiration_ms: int, algorithm: str = "HS512"):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._expiration = timedelta(milliseconds=expiration_ms)
        self.algorithm = algorithm

    @classmethod
    def from_config(cls) -> "TokenProvider":
        """Build a provider from PHOTOSHELF_JWT_* settings."""
        return cls(config.JWT_SECRET, config.JWT_EXPIRATION_MS, config.JWT_ALGORITHM)

    def issue_token(self, user_id: int, now: datetime | None = None) -> str:
        """Sign a token for the user.

        Args:
            user_id: Principal to embed as ``sub``
            now: Issue time (defaults to current UTC time)

        Returns:
            Compact JWT string
        """
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self._expiration,
        }
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def validate_token(self, token: str) -> int:
        """Resolve a token to its user ID.

        Raises:
            TokenMalformedError: Not a JWT, bad claims or non-integer subject
            TokenUnsupportedError: Signed with another algorithm
            TokenSignatureError: Signature does not match the secret
            TokenExpiredError: ``exp`` is in the past
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            logger.warning("Rejected token: undecodable header")
            raise TokenMalformedError()

        algorithm = header.get("alg")
        if algorithm != self.algorithm:
            logger.warning("Rejected token: unsupported algorithm %s", algorithm)
            raise TokenUnsupportedError(algorithm)

        try:
            claims = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.warning("Rejected token: expired")
            raise TokenExpiredError()
        except JWTClaimsError as e:
            logger.warning("Rejected token: invalid claims (%s)", e)
            raise TokenMalformedError(f"Invalid token claims: {e}")
        except JWTError as e:
            if "Signature verification failed" in str(e):
                logger.warning("Rejected token: bad signature")
                raise TokenSignatureError()
            logger.warning("Rejected token: %s", e)
            raise TokenMalformedError()

        subject = claims.get("sub")
        try:
            return int(subject)
        except (TypeError, ValueError):
            logger.warning("Rejected token: subject %r is not a user ID", subject)
            raise TokenMalformedError("Token subject is not a user ID")
