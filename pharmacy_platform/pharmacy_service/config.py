"""
Configuration management for the pharmacy service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal

from .auth import AuthConfig


class Settings(BaseSettings):
    """Pharmacy service configuration loaded from environment variables"""

    # Server Configuration
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./pharmacy.db"

    # Token signing
    JWT_SECRET_KEY: str = "change-this-secret-in-prod"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Password hashing (pbkdf2_sha256 avoids external bcrypt backend issues)
    PASSWORD_SCHEME: str = "pbkdf2_sha256"
    PASSWORD_ROUNDS: int = 29000

    # Pharmacy search
    SEARCH_FIELDS: List[str] = ["name", "city", "detailed_address"]
    SEARCH_MATCH_MODE: Literal["contains", "prefix"] = "contains"

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    def auth_config(self) -> AuthConfig:
        return AuthConfig(
            secret_key=self.JWT_SECRET_KEY,
            algorithm=self.JWT_ALGORITHM,
            access_token_expire_minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES,
            password_scheme=self.PASSWORD_SCHEME,
            password_rounds=self.PASSWORD_ROUNDS,
        )


# Global settings instance
settings = Settings()
