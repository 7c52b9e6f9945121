"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .branch import Branch  # noqa: F401
from .department import Department  # noqa: F401
from .notification import Notification, NotificationType  # noqa: F401
from .role import Permission, Role  # noqa: F401
from .school import School  # noqa: F401
from .setting import Setting, SettingType  # noqa: F401
from .user import User  # noqa: F401

__all__ = [
    "Base",
    "User",
    "Role",
    "Permission",
    "School",
    "Branch",
    "Department",
    "Notification",
    "NotificationType",
    "Setting",
    "SettingType",
]
