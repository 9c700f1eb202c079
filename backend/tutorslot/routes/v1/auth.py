# backend/tutorslot/routes/v1/auth.py
"""
Authentication routes - API v1

Versioned authentication endpoints under /api/v1/auth.

Endpoints:
    POST /register                       → User registration
    POST /login                          → OAuth2 password login
    GET /me                              → Current user
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from ...api.dependencies.auth import get_current_active_user
from ...api.dependencies.services import get_auth_service
from ...auth import create_access_token
from ...core.exceptions import DomainException
from ...core.messages import get_user_message
from ...errors import handle_domain_exception
from ...models.user import User
from ...schemas.user import Token, UserCreate, UserResponse
from ...services.auth_service import AuthService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["auth-v1"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Create an account. Staff roles are reserved for the initial admin email."""
    try:
        user = await asyncio.to_thread(
            auth_service.register_user,
            email=str(payload.email),
            password=payload.password,
            name=payload.name,
            role=payload.role,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return UserResponse.from_user(user)


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth_service: AuthService = Depends(get_auth_service),
) -> Token:
    """OAuth2 password login; ``username`` carries the email address."""
    try:
        user = await asyncio.to_thread(
            auth_service.authenticate_user, form_data.username, form_data.password
        )
    except DomainException as e:
        handle_domain_exception(e)

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "message": get_user_message("INVALID_CREDENTIALS"),
                "code": "INVALID_CREDENTIALS",
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": user.email})
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: User = Depends(get_current_active_user)) -> UserResponse:
    return UserResponse.from_user(current_user)
