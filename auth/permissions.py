"""
auth/permissions.py -- Role defaults and permission checks.

Two checks exist and they intentionally disagree for non-admin roles:

  effective_permissions(account)
      role defaults UNION explicitly granted permissions. Used for display
      (login response, /auth/me, admin user listings).

  has_permission(account, permission)
      admin -> always True; everyone else -> membership in the explicitly
      granted list ONLY. Role defaults are not consulted. This is what the
      authorization guard enforces.

A moderator with an empty stored list is therefore shown create_course in
their effective set but is refused by require_permission("create_course").
The narrower check is kept as-is until product confirms which behaviour is
wanted; see DESIGN.md.

Layer rule: no imports from api/ or cms/.
"""

from __future__ import annotations

from auth.models import Account, Permission, Role

ALL_PERMISSIONS: frozenset[Permission] = frozenset(Permission)

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.admin: ALL_PERMISSIONS,
    Role.moderator: frozenset(
        {
            Permission.create_course,
            Permission.edit_course,
            Permission.create_college,
            Permission.edit_college,
            Permission.view_analytics,
        }
    ),
    Role.user: frozenset(),
}


def _stored(account: Account) -> set[Permission]:
    # Unknown strings in the stored list are ignored rather than raising; the
    # request models already reject them on the way in.
    valid = {p.value for p in Permission}
    return {Permission(p) for p in account.permissions if p in valid}


def effective_permissions(account: Account) -> set[Permission]:
    """Return role defaults plus explicit grants; the full universe for admins."""
    if account.role == Role.admin.value:
        return set(ALL_PERMISSIONS)
    try:
        defaults = ROLE_PERMISSIONS[Role(account.role)]
    except ValueError:
        defaults = frozenset()
    return set(defaults) | _stored(account)


def has_permission(account: Account, permission: Permission | str) -> bool:
    """Return True if the account may exercise permission.

    Admins pass unconditionally. Other roles are checked against the stored
    explicit list only (see module docstring).
    """
    if account.role == Role.admin.value:
        return True
    value = permission.value if isinstance(permission, Permission) else permission
    return value in account.permissions


def sorted_permissions(perms: set[Permission]) -> list[str]:
    """Stable, declaration-ordered list of permission values for responses."""
    return [p.value for p in Permission if p in perms]
