"""Idempotent seed step for permissions, roles, settings and the first admin."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from school_admin.config.settings import settings
from school_admin.models import Permission, Role, Setting, User
from school_admin.utils import hash_password

logger = logging.getLogger(__name__)

PERMISSIONS: dict[str, str] = {
    "view-school": "View School",
    "create-school": "Create School",
    "edit-school": "Edit School",
    "delete-school": "Delete School",
    "view-branch": "View Branch",
    "create-branch": "Create Branch",
    "edit-branch": "Edit Branch",
    "delete-branch": "Delete Branch",
    "view-department": "View Department",
    "create-department": "Create Department",
    "edit-department": "Edit Department",
    "delete-department": "Delete Department",
    "view-settings": "View Settings",
    "edit-settings": "Edit Settings",
}

ROLE_PERMISSIONS: dict[str, list[str]] = {
    "admin": list(PERMISSIONS),
    "manager": [
        "view-branch", "create-branch", "edit-branch",
        "view-school", "create-school", "edit-school",
        "view-department", "create-department", "edit-department",
        "view-settings",
    ],
    "viewer": ["view-branch", "view-school", "view-department"],
}

DEFAULT_SETTINGS: list[dict] = [
    {"key": "app_name", "value": "School Management System", "type": "string", "description": "Application name", "group": "general", "is_public": True},
    {"key": "app_description", "value": "A comprehensive school management system", "type": "string", "description": "Application description", "group": "general", "is_public": True},
    {"key": "app_version", "value": "1.0.0", "type": "string", "description": "Application version", "group": "general", "is_public": True},
    {"key": "app_timezone", "value": "UTC", "type": "string", "description": "Application timezone", "group": "general", "is_public": False},
    {"key": "app_locale", "value": "en", "type": "string", "description": "Application locale", "group": "general", "is_public": False},
    {"key": "maintenance_mode", "value": "false", "type": "boolean", "description": "Enable maintenance mode", "group": "system", "is_public": False},
    {"key": "max_login_attempts", "value": "5", "type": "integer", "description": "Maximum login attempts before lockout", "group": "system", "is_public": False},
    {"key": "session_timeout", "value": "120", "type": "integer", "description": "Session timeout in minutes", "group": "system", "is_public": False},
    {"key": "enable_registration", "value": "true", "type": "boolean", "description": "Enable user registration", "group": "system", "is_public": False},
    {"key": "backup_enabled", "value": "true", "type": "boolean", "description": "Enable automatic backups", "group": "backup", "is_public": False},
    {"key": "backup_frequency", "value": "daily", "type": "string", "description": "Backup frequency (daily, weekly, monthly)", "group": "backup", "is_public": False},
    {"key": "backup_retention_days", "value": "30", "type": "integer", "description": "Number of days to keep backups", "group": "backup", "is_public": False},
    {"key": "mail_from_name", "value": "School Management System", "type": "string", "description": "Email sender name", "group": "email", "is_public": False},
    {"key": "mail_from_address", "value": "noreply@school.com", "type": "string", "description": "Email sender address", "group": "email", "is_public": False},
    {"key": "mail_reply_to", "value": "support@school.com", "type": "string", "description": "Email reply-to address", "group": "email", "is_public": False},
    {"key": "notifications_enabled", "value": "true", "type": "boolean", "description": "Enable notifications", "group": "notifications", "is_public": False},
    {"key": "email_notifications", "value": "true", "type": "boolean", "description": "Enable email notifications", "group": "notifications", "is_public": False},
    {"key": "sms_notifications", "value": "false", "type": "boolean", "description": "Enable SMS notifications", "group": "notifications", "is_public": False},
]


async def seed_permissions(session: AsyncSession) -> dict[str, Role]:
    """Ensure every permission and role exists with its grants."""

    existing = {
        permission.name: permission
        for permission in (await session.execute(select(Permission))).scalars().all()
    }
    for name, label in PERMISSIONS.items():
        if name not in existing:
            existing[name] = Permission(name=name, label=label)
            session.add(existing[name])

    roles = {
        role.name: role
        for role in (await session.execute(select(Role))).scalars().all()
    }
    for role_name, granted in ROLE_PERMISSIONS.items():
        role = roles.get(role_name)
        if role is None:
            role = roles[role_name] = Role(name=role_name, permissions=[])
            session.add(role)
        held = {permission.name for permission in role.permissions}
        for name in granted:
            if name not in held:
                role.permissions.append(existing[name])

    await session.flush()
    return roles


async def seed_settings(session: AsyncSession) -> int:
    """Insert missing default settings; existing values are left alone."""

    present = set((await session.execute(select(Setting.key))).scalars().all())
    created = 0
    for row in DEFAULT_SETTINGS:
        if row["key"] in present:
            continue
        session.add(Setting(**row))
        created += 1
    await session.flush()
    return created


async def seed_admin(session: AsyncSession, admin_role: Role) -> User | None:
    result = await session.execute(
        select(User).where(User.email == settings.admin.email)
    )
    if result.scalar_one_or_none() is not None:
        return None

    user = User(
        name=settings.admin.name,
        email=settings.admin.email,
        password_hash=hash_password(settings.admin.password.get_secret_value()),
        roles=[admin_role],
    )
    session.add(user)
    await session.flush()
    logger.info("Created bootstrap administrator %s", user.email)
    return user


async def seed_defaults(session: AsyncSession) -> None:
    roles = await seed_permissions(session)
    created = await seed_settings(session)
    await seed_admin(session, roles["admin"])
    await session.commit()
    logger.info("Seed step complete (%d new settings)", created)


__all__ = [
    "DEFAULT_SETTINGS",
    "PERMISSIONS",
    "ROLE_PERMISSIONS",
    "seed_admin",
    "seed_defaults",
    "seed_permissions",
    "seed_settings",
]
