"""The authenticated identity passed explicitly into every service call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .core.enums import RoleName

if TYPE_CHECKING:
    from .models.user import User


@dataclass(frozen=True)
class Actor:
    """Who is performing an operation, with the role resolved at request time."""

    uid: str
    email: str
    role: RoleName

    @property
    def is_admin(self) -> bool:
        return self.role.is_admin

    @property
    def is_staff(self) -> bool:
        return self.role.is_staff

    @classmethod
    def from_user(cls, user: "User") -> "Actor":
        return cls(uid=user.id, email=user.email, role=RoleName(user.role))
