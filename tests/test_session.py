"""Tests for mdmirror.sync.session and the in-memory surfaces."""

import pytest

from mdmirror.models import NoticeLevel
from mdmirror.sync.session import (
    DEFAULT_FILENAME,
    RECENT_NOTICES,
    WELCOME_DOCUMENT,
    EditorSession,
    Theme,
    ViewMode,
)
from mdmirror.sync.surfaces import InMemoryTextBuffer, PreviewSurface
from mdmirror.tree.nodes import NodeKind, Text, element, root


class TestInMemoryTextBuffer:
    def test_replace_notifies_listeners(self):
        buffer = InMemoryTextBuffer("a")
        seen = []
        buffer.subscribe(seen.append)

        buffer.replace("b")

        assert buffer.text == "b"
        assert seen == ["b"]
        assert buffer.revision == 1

    def test_replace_with_same_text_still_counts(self):
        buffer = InMemoryTextBuffer("a")
        buffer.replace("a")
        assert buffer.revision == 1

    def test_unsubscribe(self):
        buffer = InMemoryTextBuffer()
        seen = []
        unsubscribe = buffer.subscribe(seen.append)

        unsubscribe()
        unsubscribe()
        buffer.replace("x")

        assert seen == []


class TestPreviewSurface:
    def test_starts_empty(self):
        surface = PreviewSurface()
        assert surface.root == root()
        assert surface.focused is False

    def test_replace_different_tree(self):
        surface = PreviewSurface()
        tree = root(element(NodeKind.PARAGRAPH, Text("x")))
        assert surface.replace(tree) is True
        assert surface.root is tree
        assert surface.revision == 1

    def test_replace_equal_tree_is_skipped(self):
        surface = PreviewSurface(root(element(NodeKind.PARAGRAPH, Text("x"))))
        current = surface.root

        assert surface.replace(root(element(NodeKind.PARAGRAPH, Text("x")))) is False
        assert surface.root is current
        assert surface.revision == 0


class TestEditorSession:
    def test_defaults(self):
        session = EditorSession()
        assert session.text == WELCOME_DOCUMENT
        assert session.filename == DEFAULT_FILENAME
        assert session.path is None
        assert session.modified is False
        assert session.theme is Theme.DARK
        assert session.view_mode is ViewMode.SPLIT
        assert session.scroll_sync is True

    def test_welcome_document_shows_a_diagram(self):
        assert "```mermaid" in WELCOME_DOCUMENT

    def test_title_marks_modified(self):
        session = EditorSession(text="")
        assert session.title == "Untitled"
        session.mark_modified()
        assert session.title == "* Untitled"
        session.mark_saved()
        assert session.title == "Untitled"

    def test_load_document(self, tmp_path):
        session = EditorSession(text="old")
        session.mark_modified()
        path = tmp_path / "notes.md"

        session.load_document("notes.md", "# Notes", path=path)

        assert session.text == "# Notes"
        assert session.filename == "notes.md"
        assert session.path == path
        assert session.modified is False

    def test_custom_buffer_is_used(self):
        buffer = InMemoryTextBuffer("from host")
        session = EditorSession(text="ignored", buffer=buffer)
        assert session.buffer is buffer
        assert session.text == "from host"

    def test_notify_records_and_broadcasts(self):
        session = EditorSession(text="")
        received = []
        session.subscribe(received.append)

        notice = session.notify("Saved: a.md", NoticeLevel.SUCCESS)

        assert notice.level is NoticeLevel.SUCCESS
        assert received == [notice]
        assert list(session.notices) == [notice]

    def test_notify_default_level(self):
        session = EditorSession(text="")
        assert session.notify("hello").level is NoticeLevel.INFO

    def test_notice_history_is_bounded(self):
        session = EditorSession(text="")
        for i in range(RECENT_NOTICES + 5):
            session.notify(f"n{i}")
        assert len(session.notices) == RECENT_NOTICES
        assert session.notices[-1].message == f"n{RECENT_NOTICES + 4}"

    def test_unsubscribe_notices(self):
        session = EditorSession(text="")
        received = []
        unsubscribe = session.subscribe(received.append)
        unsubscribe()
        session.notify("x")
        assert received == []

    def test_toggle_theme(self):
        session = EditorSession(text="")
        assert session.toggle_theme() is Theme.LIGHT
        assert session.toggle_theme() is Theme.DARK

    def test_set_view_mode_accepts_strings(self):
        session = EditorSession(text="")
        session.set_view_mode("preview")
        assert session.view_mode is ViewMode.PREVIEW

    def test_set_view_mode_rejects_unknown(self):
        session = EditorSession(text="")
        with pytest.raises(ValueError):
            session.set_view_mode("fullscreen")
