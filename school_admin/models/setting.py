"""SQLAlchemy model for typed key/value application settings."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, Column, Integer, String, Text

from school_admin.models.base import Base, TimestampMixin


class SettingType(str, Enum):
    """Declared type used to cast the stored text on read."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    JSON = "json"


class Setting(TimestampMixin, Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(255), nullable=False, unique=True, index=True)
    value = Column(Text, nullable=True)
    type = Column(String(20), nullable=False, default=SettingType.STRING.value)
    description = Column(Text, nullable=True)
    group = Column(String(100), nullable=False, default="general", index=True)
    is_public = Column(Boolean, nullable=False, default=False)


__all__ = ["Setting", "SettingType"]
