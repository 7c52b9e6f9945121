"""Tests for the JSON-file translation store."""

from __future__ import annotations

import json
import logging

import pytest

from school_admin.services.translations import (
    TranslationKeyNotFound,
    TranslationStore,
    TranslationStoreError,
    substitute,
)


@pytest.fixture
def store(tmp_path) -> TranslationStore:
    return TranslationStore(tmp_path / "lang")


def test_missing_file_reads_as_empty(store):
    assert store.get("fa") == {}


def test_malformed_file_reads_as_empty(store):
    store.base_path.mkdir(parents=True)
    (store.base_path / "ps.json").write_text("{not json", encoding="utf-8")

    assert store.get("ps") == {}


def test_non_string_values_are_dropped(store, caplog):
    store.base_path.mkdir(parents=True)
    (store.base_path / "en.json").write_text(
        json.dumps({"title": "Schools", "n": 5, "nested": {"a": "b"}, "none": None}),
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="school_admin.services.translations"):
        translations = store.get("en")

    assert translations == {"title": "Schools"}
    assert "Skipped 3 non-string entries" in caplog.text


def test_top_level_array_reads_as_empty(store):
    store.base_path.mkdir(parents=True)
    (store.base_path / "fa.json").write_text('["a", "b"]', encoding="utf-8")

    assert store.get("fa") == {}


def test_unsupported_language_is_rejected(store):
    with pytest.raises(ValueError):
        store.get("xx")
    with pytest.raises(ValueError):
        store.path_for("../en")


def test_set_writes_sorted_pretty_unicode(store):
    store.set("fa", {"welcome": "خوش آمدید", "app": "سیستم"})

    content = (store.base_path / "fa.json").read_text(encoding="utf-8")
    assert content.index('"app"') < content.index('"welcome"')
    assert "خوش آمدید" in content
    assert '\n    "app"' in content
    assert json.loads(content) == {"app": "سیستم", "welcome": "خوش آمدید"}


def test_add_and_delete_key(store):
    store.add_key("en", "hello", "Hello")
    store.add_key("en", "bye", "Bye")
    store.delete_key("en", "hello")

    assert store.get("en") == {"bye": "Bye"}


def test_delete_absent_key_raises_not_found(store):
    with pytest.raises(TranslationKeyNotFound) as excinfo:
        store.delete_key("en", "ghost")

    assert excinfo.value.status_code == 404


def test_translate_falls_back_to_default_then_key(store):
    store.set("en", {"greeting": "Hello {{ name }}", "only_en": "English"})
    store.set("fa", {"greeting": "سلام {{name}}"})

    assert store.translate("fa", "greeting", {"name": "Ali"}) == "سلام Ali"
    assert store.translate("fa", "only_en") == "English"
    assert store.translate("ps", "unknown.key") == "unknown.key"


def test_all_covers_every_supported_language(store):
    store.set("en", {"a": "A"})

    assert store.all() == {"en": {"a": "A"}, "fa": {}, "ps": {}}


def test_unknown_placeholders_are_left_untouched():
    assert substitute("Hi {{name}} from {{place}}", {"name": "Sara"}) == "Hi Sara from {{place}}"


def test_write_failure_raises_store_error(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory", encoding="utf-8")
    store = TranslationStore(blocker)

    with pytest.raises(TranslationStoreError) as excinfo:
        store.set("en", {"a": "A"})

    assert excinfo.value.status_code == 500
