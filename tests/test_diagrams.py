"""Tests for mdmirror.render.diagrams.MermaidCliRenderer.

A tiny shell script stands in for the Mermaid CLI.
"""

import stat

import pytest

from mdmirror.render.diagrams import (
    DiagramRenderError,
    MermaidCliRenderer,
    diagram_theme,
)
from mdmirror.render.pipeline import RenderPipeline
from mdmirror.tree.nodes import NodeKind

FAKE_MMDC = """\
#!/bin/sh
theme=""
while [ $# -gt 0 ]; do
  case "$1" in
    -o) out="$2"; shift ;;
    -t) theme="$2"; shift ;;
  esac
  shift
done
printf '<svg data-theme="%s"></svg>' "$theme" > "$out"
"""

FAILING_MMDC = """\
#!/bin/sh
echo "" >&2
echo "Parse error on line 2:" >&2
exit 1
"""

SILENT_MMDC = """\
#!/bin/sh
exit 0
"""


def _script(tmp_path, name, body):
    path = tmp_path / name
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IEXEC)
    return str(path)


def test_diagram_theme_mapping():
    assert diagram_theme("dark") == "dark"
    assert diagram_theme("light") == "default"


class TestMermaidCliRenderer:
    async def test_renders_svg(self, tmp_path):
        renderer = MermaidCliRenderer(command=_script(tmp_path, "mmdc", FAKE_MMDC))
        svg = await renderer("graph TD\n  A-->B\n", "mermaid-1")
        assert svg == '<svg data-theme="dark"></svg>'

    async def test_passes_theme(self, tmp_path):
        renderer = MermaidCliRenderer(
            command=_script(tmp_path, "mmdc", FAKE_MMDC), theme="default"
        )
        assert 'data-theme="default"' in await renderer("graph TD", "d-1")

    async def test_missing_command(self, tmp_path):
        renderer = MermaidCliRenderer(command=str(tmp_path / "nope"))
        with pytest.raises(DiagramRenderError, match="not found on PATH"):
            await renderer("graph TD", "d-1")

    async def test_failure_reports_first_stderr_line(self, tmp_path):
        renderer = MermaidCliRenderer(
            command=_script(tmp_path, "mmdc", FAILING_MMDC)
        )
        with pytest.raises(DiagramRenderError, match="^Parse error on line 2:$"):
            await renderer("graph TD\n  A-->", "d-1")

    async def test_no_output_file(self, tmp_path):
        renderer = MermaidCliRenderer(
            command=_script(tmp_path, "mmdc", SILENT_MMDC)
        )
        with pytest.raises(DiagramRenderError, match="produced no output"):
            await renderer("graph TD", "d-1")

    async def test_pipeline_integration(self, tmp_path):
        renderer = MermaidCliRenderer(
            command=_script(tmp_path, "mmdc", FAILING_MMDC)
        )
        tree = await RenderPipeline(renderer).render("```mermaid\nbad\n```")
        error = tree.children[0]
        assert error.kind is NodeKind.DIAGRAM_ERROR
        assert error.get("message") == "Parse error on line 2:"
