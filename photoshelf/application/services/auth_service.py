"""Authentication service - credential checks and token handling."""
import logging

from ...exceptions import InvalidCredentialsError
from ...infrastructure.repositories import UserRepository
from ...infrastructure.security import TokenProvider

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations.

    Responsibilities:
    - Credential verification (username or email + password)
    - Access token issuing
    """

    def __init__(
        self,
        user_repository: UserRepository,
        token_provider: TokenProvider
    ):
        self.user_repo = user_repository
        self.token_provider = token_provider

    def authenticate(self, login: str, password: str) -> str:
        """Verify credentials and issue an access token.

        Args:
            login: Username or email
            password: Plain text password

        Returns:
            Signed access token

        Raises:
            InvalidCredentialsError: Unknown login or wrong password
        """
        user = self.user_repo.authenticate(login, password)
        if not user:
            logger.info("Sign-in failed for %r", login)
            raise InvalidCredentialsError()
        return self.token_provider.issue_token(user["id"])

