# backend/tutorslot/services/user_service.py
"""
User Service for the tutoring reservation backend.

Profile reads and updates (display name, course plan) and administrative
role changes. Roles are read from the store on every request, so a role
change applies to the user's next call without a new token.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core import permissions
from ..core.enums import PlanId, RoleName
from ..core.exceptions import (
    ForbiddenException,
    NotFoundException,
    RepositoryException,
    StorageException,
    ValidationException,
)
from ..core.messages import get_user_message
from ..models.user import User
from ..principal import Actor
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100


class UserService(BaseService):
    """Profile and role management."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)

    def _get_user(self, user_id: str) -> User:
        try:
            user = self.user_repository.get_by_id(user_id)
        except RepositoryException as e:
            raise StorageException(str(e), operation="get_user", entity_id=user_id) from e
        if user is None:
            raise NotFoundException(
                f"User {user_id} not found",
                code="USER_NOT_FOUND",
                user_message=get_user_message("USER_NOT_FOUND"),
            )
        return user

    @BaseService.measure_operation("get_profile")
    def get_profile(self, actor: Actor, user_id: str) -> User:
        if not permissions.can_access_user_data(actor, user_id):
            raise ForbiddenException(
                f"{actor.uid} may not read profile of {user_id}", code="PERMISSION_DENIED"
            )
        return self._get_user(user_id)

    @BaseService.measure_operation("update_profile")
    def update_profile(
        self,
        actor: Actor,
        user_id: str,
        name: Optional[str] = None,
        selected_course: Optional[PlanId] = None,
    ) -> User:
        """
        Update display name and/or course plan.

        Raises:
            ForbiddenException: Not the user and not an admin
            ValidationException: Blank or overlong name
        """
        if not permissions.can_access_user_data(actor, user_id):
            raise ForbiddenException(
                f"{actor.uid} may not update profile of {user_id}", code="PERMISSION_DENIED"
            )

        with self.transaction("update_profile", user_id):
            user = self._get_user(user_id)
            if name is not None:
                cleaned = name.strip()
                if not cleaned or len(cleaned) > MAX_NAME_LENGTH:
                    raise ValidationException(
                        "Name must be between 1 and 100 characters",
                        code="INVALID_NAME",
                        details={"max_length": MAX_NAME_LENGTH},
                    )
                user.name = cleaned
            if selected_course is not None:
                user.selected_course = selected_course.value

        self.log_operation(
            "update_profile",
            actor_id=actor.uid,
            user_id=user_id,
            profile_complete=user.is_profile_complete,
        )
        return user

    @BaseService.measure_operation("change_role")
    def change_role(self, actor: Actor, user_id: str, role: RoleName) -> User:
        """Assign a new role. Admins only."""
        if not permissions.can_manage_roles(actor):
            self.logger.warning(
                "Role change denied",
                extra={"security_event": "access_denied", "actor_id": actor.uid},
            )
            raise ForbiddenException(
                f"{actor.uid} may not change roles", code="PERMISSION_DENIED"
            )

        with self.transaction("change_role", user_id):
            user = self._get_user(user_id)
            previous = user.role
            user.role = role.value

        self.log_operation(
            "change_role",
            security_event="role_changed",
            actor_id=actor.uid,
            user_id=user_id,
            previous_role=previous,
            new_role=role.value,
        )
        return user
