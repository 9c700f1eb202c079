# backend/tutorslot/services/auth_service.py
"""
Authentication Service for the tutoring reservation backend.

Handles user registration, authentication, and user retrieval operations.
Follows the service layer pattern to keep business logic out of routes.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import DUMMY_HASH_FOR_TIMING_ATTACK, get_password_hash, verify_password
from ..core.config import settings
from ..core.enums import SELF_REGISTRATION_ROLES, RoleName
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    RepositoryException,
    StorageException,
)
from ..core.messages import get_user_message
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


def allowed_registration_roles(email: str) -> tuple:
    """
    Roles an email may sign up with.

    Students and parents register themselves. The configured initial
    administrator email may take any role so the first staff account can
    be created without a back door.
    """
    initial_admin = settings.initial_admin_email
    if initial_admin and email.strip().lower() == initial_admin.strip().lower():
        return tuple(RoleName)
    return SELF_REGISTRATION_ROLES


class AuthService(BaseService):
    """Service for handling authentication operations."""

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.user_repository = RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("register_user")
    def register_user(
        self,
        email: str,
        password: str,
        name: str = "",
        role: RoleName = RoleName.STUDENT,
    ) -> User:
        """
        Register a new user.

        Args:
            email: User's email address
            password: Plain text password (will be hashed)
            name: Display name (may be completed later in profile setup)
            role: Requested role

        Returns:
            Created user object

        Raises:
            ForbiddenException: If the role may not be self-assigned
            ConflictException: If email already exists
        """
        self.log_operation("register_user", email=email, role=role.value)

        if role not in allowed_registration_roles(email):
            self.logger.warning(
                f"Registration with restricted role refused: {email}",
                extra={"security_event": "restricted_role_signup", "role": role.value},
            )
            raise ForbiddenException(
                f"Role {role.value} cannot be self-assigned",
                code="ROLE_NOT_ALLOWED",
                details={"role": role.value},
            )

        if self.get_user_by_email(email):
            self.logger.warning(f"Registration failed - email already exists: {email}")
            raise ConflictException(
                "Email already registered",
                code="EMAIL_TAKEN",
                user_message=get_user_message("EMAIL_TAKEN"),
            )

        hashed_password = get_password_hash(password)

        with self.transaction("register_user"):
            try:
                user: User = self.user_repository.create(
                    email=email.strip().lower(),
                    hashed_password=hashed_password,
                    name=name.strip(),
                    role=role.value,
                )
            except IntegrityError as e:
                self.logger.error(f"Integrity error registering user {email}: {str(e)}")
                raise ConflictException(
                    "Email already registered",
                    code="EMAIL_TAKEN",
                    user_message=get_user_message("EMAIL_TAKEN"),
                )
            except RepositoryException as e:
                raise StorageException(str(e), operation="register_user") from e

        self.logger.info(f"Successfully registered user: {email} with role: {role.value}")
        return user

    @BaseService.measure_operation("authenticate_user")
    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user by email and password.

        Returns:
            User object if authentication successful, None otherwise
        """
        self.logger.info(f"Authentication attempt for user: {email}")

        user = self.get_user_by_email(email)
        if not user:
            self.logger.warning(f"Authentication failed - user not found: {email}")
            # Prevent timing attacks - still do a fake verification
            verify_password(password, DUMMY_HASH_FOR_TIMING_ATTACK)
            return None

        if not verify_password(password, user.hashed_password):
            self.logger.warning(f"Authentication failed - incorrect password: {email}")
            return None

        if not user.is_active:
            self.logger.warning(f"Authentication failed - account deactivated: {email}")
            return None

        self.logger.info(f"Successful authentication for user: {email}")
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        try:
            return self.user_repository.get_by_email(email)
        except RepositoryException as e:
            raise StorageException(str(e), operation="get_user_by_email") from e

    @BaseService.measure_operation("get_current_user")
    def get_current_user(self, email: str) -> User:
        """
        Get current user by email, raising exception if not found.

        Raises:
            NotFoundException: If user not found
        """
        user = self.get_user_by_email(email)
        if not user:
            self.logger.error(f"Current user not found: {email}")
            raise NotFoundException(
                "User not found",
                code="USER_NOT_FOUND",
                user_message=get_user_message("USER_NOT_FOUND"),
            )

        return user
