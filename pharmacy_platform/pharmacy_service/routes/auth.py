"""
Auth Router - registration, login, password reset and user lookup.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from ..deps import get_auth_service, get_current_user
from ..models import User
from ..schemas import MessageResponse, PasswordReset, Token, UserCreate, UserLogin, UserResponse
from ..services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Token)
def register(payload: UserCreate, service: AuthService = Depends(get_auth_service)):
    token = service.register(payload.username, payload.email, payload.password)
    return Token(access_token=token)


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, service: AuthService = Depends(get_auth_service)):
    token = service.login(credentials.email, credentials.password)
    return Token(access_token=token)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(payload: PasswordReset, service: AuthService = Depends(get_auth_service)):
    return service.reset_password(payload.email, payload.new_password)


@router.get("/me", response_model=UserResponse)
def read_current_user(user: User = Depends(get_current_user)):
    return user


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: str, service: AuthService = Depends(get_auth_service)):
    user = service.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
