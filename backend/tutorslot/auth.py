from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from .core.config import settings
from .core.constants import API_V1_PREFIX
from .core.messages import get_user_message

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Pre-computed bcrypt hash for timing attack prevention.
# Used when user doesn't exist to prevent timing-based user enumeration.
DUMMY_HASH_FOR_TIMING_ATTACK = "$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.V4ferVKnNaOuJi"

oauth2_scheme_optional = OAuth2PasswordBearer(
    tokenUrl=f"{API_V1_PREFIX}/auth/login", auto_error=False
)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password
        hashed_password: The hashed password to compare against

    Returns:
        bool: True if password matches, False otherwise
    """
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except (ValueError, TypeError) as e:
        logger.error(f"Error verifying password: {str(e)}")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    hashed = pwd_context.hash(password)
    return str(hashed)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: The data to encode in the token (``sub`` is the user's email)
        expires_delta: Optional expiration time delta

    Returns:
        str: The encoded JWT token
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire})

    encoded_jwt = cast(
        str,
        jwt.encode(
            to_encode,
            _secret_value(settings.secret_key),
            algorithm=settings.algorithm,
        ),
    )

    logger.info(f"Created access token for user: {data.get('sub')}")
    return encoded_jwt


def decode_access_token(token: str) -> Dict[str, Any]:
    payload_raw = jwt.decode(
        token,
        _secret_value(settings.secret_key),
        algorithms=[settings.algorithm],
    )
    return cast(Dict[str, Any], payload_raw)


async def get_current_user(token: Optional[str] = Depends(oauth2_scheme_optional)) -> str:
    """
    Dependency to get the current authenticated user email from JWT token.

    Returns:
        str: The user's email address

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    not_authenticated = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": get_user_message("AUTH_REQUIRED"), "code": "AUTH_REQUIRED"},
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise not_authenticated

    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.warning(f"JWT validation error: {str(e)}")
        raise not_authenticated

    email = payload.get("sub")
    if not isinstance(email, str):
        logger.warning("Token payload missing 'sub' field")
        raise not_authenticated

    logger.debug(f"Successfully validated token for user: {email}")
    return email
