"""FastAPI routers acting as controllers in the MVC architecture."""

from . import auth, branches, departments, languages, notifications, schools, settings

__all__ = [
    "auth",
    "branches",
    "departments",
    "languages",
    "notifications",
    "schools",
    "settings",
]
