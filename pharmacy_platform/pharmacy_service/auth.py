from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from .exceptions import UnauthorizedError


@dataclass(frozen=True)
class AuthConfig:
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    password_scheme: str = "pbkdf2_sha256"
    password_rounds: int = 29000


class PasswordHasher:
    """Salted one-way hashing backed by passlib."""

    def __init__(self, scheme: str = "pbkdf2_sha256", rounds: int = 29000):
        self._context = CryptContext(
            schemes=[scheme],
            deprecated="auto",
            **{f"{scheme}__default_rounds": rounds},
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        # passlib compares digests in constant time
        return self._context.verify(plain_password, hashed_password)


class TokenIssuer:
    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    def sign(self, subject: str, **claims: Any) -> str:
        expire = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)
        payload = {**claims, "sub": subject, "exp": expire}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify a token's signature and expiry.

        Raises:
            UnauthorizedError: If the token is malformed, tampered with or expired
        """
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except jwt.PyJWTError as exc:
            raise UnauthorizedError("Invalid token") from exc


def build_hasher(config: AuthConfig) -> PasswordHasher:
    return PasswordHasher(config.password_scheme, config.password_rounds)


def build_token_issuer(config: AuthConfig) -> TokenIssuer:
    return TokenIssuer(config.secret_key, config.algorithm, config.access_token_expire_minutes)
