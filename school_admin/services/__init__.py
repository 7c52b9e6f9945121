"""Service layer: listings, policies, notifications, settings and translations."""

from .cache import InMemoryTTLCache
from .listing import ListingParams, build_listing_query, paginate
from .notifications import NotificationFanout
from .observers import LifecycleEvent
from .policies import Action, policies
from .settings_store import SettingsStore
from .translations import TranslationStore

__all__ = [
    "Action",
    "InMemoryTTLCache",
    "LifecycleEvent",
    "ListingParams",
    "NotificationFanout",
    "SettingsStore",
    "TranslationStore",
    "build_listing_query",
    "paginate",
    "policies",
]
