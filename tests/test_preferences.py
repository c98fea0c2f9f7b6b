"""Tests for mdmirror.preferences."""

import logging

import pytest
from pydantic import ValidationError

from mdmirror.models import Preferences
from mdmirror.preferences import PREFERENCES_FILENAME, PreferenceStore


@pytest.fixture
def store(tmp_path):
    return PreferenceStore(tmp_path / "state")


class TestPreferenceStore:
    def test_defaults_when_missing(self, store):
        assert store.load() == Preferences()

    def test_save_and_load(self, store):
        prefs = Preferences(theme="light", view_mode="preview", sidebar_collapsed=True)
        store.save(prefs)

        assert store.path.name == PREFERENCES_FILENAME
        assert store.load() == prefs

    def test_update_merges(self, store):
        store.save(Preferences(theme="light"))

        updated = store.update(view_mode="editor")

        assert updated.theme == "light"
        assert updated.view_mode == "editor"
        assert store.load() == updated

    def test_update_rejects_invalid(self, store):
        with pytest.raises(ValidationError):
            store.update(theme="blue")
        assert not store.path.exists()

    def test_invalid_json_falls_back(self, store, caplog):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{broken", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            assert store.load() == Preferences()
        assert "invalid preferences" in caplog.text

    def test_invalid_values_fall_back(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text('{"theme": "sepia"}', encoding="utf-8")
        assert store.load() == Preferences()

    def test_save_leaves_no_temp_files(self, store):
        store.save(Preferences())
        store.save(Preferences(theme="light"))
        assert [p.name for p in store.path.parent.iterdir()] == [
            PREFERENCES_FILENAME
        ]


class TestPreferencesModel:
    def test_frozen(self):
        prefs = Preferences()
        with pytest.raises(ValidationError):
            prefs.theme = "light"

    def test_defaults(self):
        prefs = Preferences()
        assert prefs.theme == "dark"
        assert prefs.view_mode == "split"
        assert prefs.sidebar_collapsed is False
