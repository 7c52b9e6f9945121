"""Typed key/value settings with a read-through cache."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from school_admin.config.settings import settings as app_settings
from school_admin.models import Setting, SettingType
from school_admin.services.cache import MISSING, CacheBackend, InMemoryTTLCache

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "on", "yes"}
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

settings_cache = InMemoryTTLCache(default_ttl=app_settings.cache.settings_ttl_seconds)


def cache_key(key: str) -> str:
    return f"setting.{key}"


def cast_value(value: str | None, type_: str) -> Any:
    """Convert stored text into the value its declared type describes."""

    if type_ == SettingType.BOOLEAN.value:
        return value is not None and value.strip().lower() in _TRUTHY
    if type_ == SettingType.INTEGER.value:
        match = _LEADING_INT.match(value or "")
        return int(match.group(1)) if match else 0
    if type_ == SettingType.JSON.value:
        try:
            return json.loads(value) if value is not None else None
        except ValueError:
            logger.warning("Stored JSON setting could not be decoded")
            return None
    return value


def serialize_value(value: Any, type_: str) -> str | None:
    """Convert a Python value into the text stored in the ``value`` column."""

    if value is None:
        return None
    if type_ == SettingType.JSON.value and not isinstance(value, str):
        return json.dumps(value)
    if type_ == SettingType.BOOLEAN.value and isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SettingsStore:
    """Reads and writes ``Setting`` rows through an injected cache."""

    def __init__(
        self,
        session: AsyncSession,
        cache: CacheBackend = settings_cache,
    ) -> None:
        self.session = session
        self.cache = cache

    async def _find(self, key: str) -> Setting | None:
        result = await self.session.execute(select(Setting).where(Setting.key == key))
        return result.scalar_one_or_none()

    async def get(self, key: str, default: Any = None) -> Any:
        """Return the casted value for ``key``; a missing key is never cached."""

        cached = self.cache.get(cache_key(key))
        if cached is not MISSING:
            return cached

        setting = await self._find(key)
        if setting is None:
            return default

        value = cast_value(setting.value, setting.type)
        self.cache.set(cache_key(key), value)
        return value

    async def set(
        self,
        key: str,
        value: Any,
        type: str = SettingType.STRING.value,
        description: str | None = None,
        group: str = "general",
        is_public: bool = False,
    ) -> Setting:
        """Insert or update ``key`` and evict its cached value."""

        type_ = SettingType(type).value
        setting = await self._find(key)
        if setting is None:
            setting = Setting(key=key)
            self.session.add(setting)

        setting.value = serialize_value(value, type_)
        setting.type = type_
        setting.description = description
        setting.group = group
        setting.is_public = is_public

        await self.session.commit()
        await self.session.refresh(setting)
        self.cache.evict(cache_key(key))
        logger.info("Setting '%s' updated", key)
        return setting

    async def get_by_group(self, group: str) -> list[Setting]:
        result = await self.session.execute(
            select(Setting).where(Setting.group == group).order_by(Setting.key)
        )
        return list(result.scalars().all())

    async def get_public(self) -> list[Setting]:
        result = await self.session.execute(
            select(Setting).where(Setting.is_public.is_(True)).order_by(Setting.key)
        )
        return list(result.scalars().all())

    async def find(self, key: str) -> Setting | None:
        return await self._find(key)

    async def clear_cache(self) -> None:
        """Evict the cached value of every stored setting."""

        result = await self.session.execute(select(Setting.key))
        for key in result.scalars().all():
            self.cache.evict(cache_key(key))


__all__ = [
    "SettingsStore",
    "cache_key",
    "cast_value",
    "serialize_value",
    "settings_cache",
]
