"""
auth/models.py -- Domain dataclasses and enums for authentication entities.

Pattern: Data class (pure data container, zero logic). Permission rules live in
auth/permissions.py; stores and routes do the work.

Layer rule: no imports from api/ or cms/.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    admin = "admin"
    moderator = "moderator"
    user = "user"


class Permission(str, Enum):
    """The fixed permission universe. Grantable independently of role."""

    create_course = "create_course"
    edit_course = "edit_course"
    delete_course = "delete_course"
    create_college = "create_college"
    edit_college = "edit_college"
    delete_college = "delete_college"
    manage_users = "manage_users"
    view_analytics = "view_analytics"


@dataclass
class Account:
    """An identity that can sign in to the admin panel or the public site.

    email is the unique login key and is stored lower-cased.

    permissions holds only the explicitly granted capabilities. The role's
    default set is NOT copied in here -- see auth.permissions for how the two
    combine.

    hashed_password is a bcrypt hash. The store never persists plaintext.
    """

    name: str
    email: str
    role: str = Role.user.value
    id: int | None = None
    hashed_password: str | None = None
    permissions: list[str] = field(default_factory=list)
    is_active: bool = True
    avatar: str = ""
    phone: str | None = None
    last_login: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
