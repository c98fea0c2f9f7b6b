"""Tests for the mdmirror command-line interface."""

from unittest.mock import patch

import pytest

from mdmirror import __version__
from mdmirror.cli import main

DOC = "# Title\n\n- [x] done\n- [ ] todo\n\n```mermaid\ngraph TD\n```\n"


@pytest.fixture(autouse=True)
def _no_logging_setup():
    # Keep pytest's log capture handlers in place
    with patch("mdmirror.cli.setup_logging") as mock_setup:
        yield mock_setup


@pytest.fixture
def doc(isolated_env):
    path = isolated_env / "doc.md"
    path.write_text(DOC, encoding="utf-8")
    return path


class TestRender:
    def test_outline(self, doc, capsys):
        assert main(["render", str(doc), "--no-diagrams"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("root\n")
        assert "  heading level=1\n" in out
        assert "checkbox checked=True" in out
        assert "code_block language='mermaid'" in out

    def test_html(self, doc, capsys):
        assert main(["render", str(doc), "--html", "--no-diagrams"]) == 0
        out = capsys.readouterr().out
        assert "<h1>Title</h1>" in out
        assert '<pre><code class="language-mermaid">' in out

    def test_missing_mmdc_renders_inline_error(self, doc, capsys, monkeypatch):
        monkeypatch.setenv("MDMIRROR_MERMAID_CMD", str(doc.parent / "no-mmdc"))
        assert main(["render", str(doc)]) == 0
        assert "diagram_error" in capsys.readouterr().out

    def test_relative_path(self, doc, capsys):
        assert main(["render", "doc.md", "--no-diagrams"]) == 0

    def test_missing_file(self, isolated_env, capsys):
        assert main(["render", "missing.md"]) == 1
        assert "Error: File not found: missing.md" in capsys.readouterr().err

    def test_invalid_config(self, doc, capsys, monkeypatch):
        monkeypatch.setenv("MDMIRROR_FORWARD_DELAY_MS", "soon")
        assert main(["render", str(doc)]) == 1
        assert "Error: Invalid MDMIRROR_FORWARD_DELAY_MS" in capsys.readouterr().err


class TestNormalize:
    def test_round_trip(self, doc, capsys):
        assert main(["normalize", str(doc), "--no-diagrams"]) == 0
        assert capsys.readouterr().out == DOC

    def test_canonicalises(self, isolated_env, capsys):
        path = isolated_env / "messy.md"
        path.write_text("Title\n=====\n\n* a\n* b\n\n__bold__", encoding="utf-8")

        assert main(["normalize", str(path)]) == 0

        assert capsys.readouterr().out == "# Title\n\n- a\n- b\n\n**bold**\n"

    def test_diagrams_dropped_with_renderer(self, doc, capsys, monkeypatch):
        monkeypatch.setenv("MDMIRROR_MERMAID_CMD", str(doc.parent / "no-mmdc"))
        assert main(["normalize", str(doc)]) == 0
        out = capsys.readouterr().out
        assert "graph TD" not in out
        assert out.startswith("# Title\n")


class TestStats:
    def test_counts(self, isolated_env, capsys):
        path = isolated_env / "s.md"
        path.write_text("Hello 世界\nbye", encoding="utf-8")

        assert main(["stats", str(path)]) == 0

        assert capsys.readouterr().out == "words: 4\nchars: 12\nlines: 2\n"


class TestLs:
    def test_tree_listing(self, isolated_env, capsys):
        (isolated_env / "docs").mkdir()
        (isolated_env / "docs" / "guide.md").write_text("")
        (isolated_env / "README.md").write_text("")
        (isolated_env / ".hidden.md").write_text("")

        assert main(["ls"]) == 0

        assert capsys.readouterr().out == "docs/\n  guide.md\nREADME.md\n"

    def test_empty_directory(self, isolated_env, capsys):
        assert main(["ls", str(isolated_env)]) == 0
        assert capsys.readouterr().out == ""

    def test_not_a_directory(self, doc, capsys):
        assert main(["ls", str(doc)]) == 1
        assert "not a directory" in capsys.readouterr().err


class TestGlobalOptions:
    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_command_required(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2

    def test_logging_options(self, doc, _no_logging_setup):
        main(["--debug", "--debug-format", "json", "stats", str(doc)])
        _no_logging_setup.assert_called_once_with(
            debug=True, log_file=None, debug_format="json"
        )
