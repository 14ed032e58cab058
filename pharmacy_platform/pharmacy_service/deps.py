"""
FastAPI dependencies wiring stores and services to a request's database session.
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from .auth import build_hasher, build_token_issuer
from .config import settings
from .db import get_db
from .models import User
from .repositories import SqlPharmacyStore, SqlUserStore
from .services.auth_service import AuthService
from .services.pharmacy_service import PharmacyService

# Built once; both are stateless apart from configuration
_auth_config = settings.auth_config()
_hasher = build_hasher(_auth_config)
_tokens = build_token_issuer(_auth_config)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(SqlUserStore(db), _auth_config, hasher=_hasher, tokens=_tokens)


def get_pharmacy_service(db: Session = Depends(get_db)) -> PharmacyService:
    return PharmacyService(
        SqlPharmacyStore(db),
        search_fields=settings.SEARCH_FIELDS,
        match_mode=settings.SEARCH_MATCH_MODE,
    )


def get_current_user(
    service: AuthService = Depends(get_auth_service),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> User:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    token = authorization.split(" ", 1)[1].strip()
    return service.authenticate_token(token)
