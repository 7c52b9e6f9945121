"""JSON-file-backed translation store with a default-language fallback."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from school_admin.errors import NotFoundError, UnexpectedError

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


@dataclass(frozen=True)
class Language:
    code: str
    name: str
    direction: str
    active: bool = True


SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language(code="en", name="English", direction="ltr"),
    Language(code="fa", name="دری", direction="rtl"),
    Language(code="ps", name="پښتو", direction="rtl"),
)

SUPPORTED_CODES = frozenset(language.code for language in SUPPORTED_LANGUAGES)


class TranslationKeyNotFound(NotFoundError):
    message = "Translation key not found."


class TranslationStoreError(UnexpectedError):
    message = "Failed to update translations."


def is_supported(code: str | None) -> bool:
    return code in SUPPORTED_CODES


def substitute(text: str, params: Mapping[str, object] | None) -> str:
    """Replace ``{{name}}`` tokens with the matching parameter values."""

    if not params:
        return text
    return _PLACEHOLDER.sub(
        lambda match: str(params[match.group(1)]) if match.group(1) in params else match.group(0),
        text,
    )


class TranslationStore:
    """One ``<code>.json`` file per language under ``base_path``."""

    def __init__(self, base_path: str | Path, default_language: str = "en") -> None:
        self.base_path = Path(base_path)
        self.default_language = default_language

    def path_for(self, code: str) -> Path:
        if not is_supported(code):
            raise ValueError(f"Unsupported language: {code!r}")
        return self.base_path / f"{code}.json"

    def get(self, code: str) -> dict[str, str]:
        """Return the language's mapping, or ``{}`` when no usable file exists."""

        path = self.path_for(code)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}

        try:
            translations = json.loads(content)
        except ValueError:
            logger.warning("Ignoring malformed translation file %s", path)
            return {}
        if not isinstance(translations, dict):
            logger.warning("Ignoring translation file %s without a top-level object", path)
            return {}

        entries = {
            key: value for key, value in translations.items() if isinstance(value, str)
        }
        if len(entries) != len(translations):
            logger.warning(
                "Skipped %d non-string entries in translation file %s",
                len(translations) - len(entries),
                path,
            )
        return entries

    def set(self, code: str, translations: Mapping[str, str]) -> None:
        """Persist the full mapping, keys sorted for deterministic diffs."""

        path = self.path_for(code)
        content = json.dumps(
            dict(sorted(translations.items())),
            indent=4,
            ensure_ascii=False,
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            logger.exception("Could not write translation file %s", path)
            raise TranslationStoreError() from exc

    def add_key(self, code: str, key: str, value: str) -> dict[str, str]:
        translations = self.get(code)
        translations[key] = value
        self.set(code, translations)
        return translations

    def delete_key(self, code: str, key: str) -> dict[str, str]:
        translations = self.get(code)
        if key not in translations:
            raise TranslationKeyNotFound()
        del translations[key]
        self.set(code, translations)
        return translations

    def all(self) -> dict[str, dict[str, str]]:
        return {language.code: self.get(language.code) for language in SUPPORTED_LANGUAGES}

    def translate(
        self,
        code: str,
        key: str,
        params: Mapping[str, object] | None = None,
    ) -> str:
        """Look up ``key`` in ``code``, then the default language, then echo it."""

        value = self.get(code).get(key)
        if value is None and code != self.default_language:
            value = self.get(self.default_language).get(key)
        if value is None:
            value = key
        return substitute(value, params)


__all__ = [
    "Language",
    "SUPPORTED_CODES",
    "SUPPORTED_LANGUAGES",
    "TranslationKeyNotFound",
    "TranslationStore",
    "TranslationStoreError",
    "is_supported",
    "substitute",
]
