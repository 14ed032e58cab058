import logging
from typing import Dict, Optional

from ..auth import AuthConfig, PasswordHasher, TokenIssuer, build_hasher, build_token_issuer
from ..exceptions import ConflictError, NotFoundError, UnauthorizedError
from ..models import User
from ..repositories import USER_EMAIL_CONFLICT, UserStore

logger = logging.getLogger(__name__)

PASSWORD_RESET_MESSAGE = "Password successfully updated"


class AuthService:
    """
    Registration, login and password management for users.

    Tokens are signed JWTs whose `sub` claim is the user's id.
    """

    def __init__(
        self,
        users: UserStore,
        config: AuthConfig,
        hasher: Optional[PasswordHasher] = None,
        tokens: Optional[TokenIssuer] = None,
    ):
        self.users = users
        self.hasher = hasher or build_hasher(config)
        self.tokens = tokens or build_token_issuer(config)

    def _issue_token(self, user: User) -> str:
        return self.tokens.sign(user.id, username=user.username, email=user.email)

    def register(self, username: str, email: str, password: str) -> str:
        if self.users.find_by_email(email):
            logger.warning("Registration rejected, email already in use: %s", email)
            raise ConflictError(USER_EMAIL_CONFLICT)

        user = self.users.create(
            username=username,
            email=email,
            password=self.hasher.hash(password),
        )
        logger.info("User registered: user_id=%s, username=%s", user.id, user.username)
        return self._issue_token(user)

    def login(self, email: str, password: str) -> str:
        user = self.users.find_by_email(email)
        if not user or not self.hasher.verify(password, user.password):
            logger.info("Login failed for email=%s", email)
            raise UnauthorizedError("Invalid credentials")

        logger.info("Successful login: user_id=%s, username=%s", user.id, user.username)
        return self._issue_token(user)

    def reset_password(self, email: str, new_password: str) -> Dict[str, str]:
        user = self.users.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        user.password = self.hasher.hash(new_password)
        self.users.save(user)
        logger.info("Password reset: user_id=%s", user.id)
        return {"message": PASSWORD_RESET_MESSAGE}

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.find_by_id(user_id)

    def authenticate_token(self, token: str) -> User:
        """
        Resolve a bearer token to its user.

        Raises:
            UnauthorizedError: If the token is invalid or its user no longer exists
        """
        claims = self.tokens.decode(token)
        user = self.get_user(claims.get("sub"))
        if user is None:
            raise UnauthorizedError("User not found")
        return user
