"""Diagram rendering subsystem: diagram source -> SVG markup.

The render pipeline only depends on the ``DiagramRenderer`` call shape,
``await renderer(source, diagram_id) -> svg``, which raises on failure.
``MermaidCliRenderer`` is the default implementation and shells out to the
Mermaid CLI (``mmdc``) through the blocking-call bridge.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Awaitable, Callable

from ..core.async_utils import run_sync

logger = logging.getLogger(__name__)

DiagramRenderer = Callable[[str, str], Awaitable[str]]


class DiagramRenderError(Exception):
    """Raised when a diagram cannot be rendered."""


def diagram_theme(editor_theme: str) -> str:
    """Map the editor theme to the Mermaid theme name."""
    return "dark" if editor_theme == "dark" else "default"


class MermaidCliRenderer:
    """Render Mermaid sources by invoking the ``mmdc`` command.

    Args:
        command: Executable name or path of the Mermaid CLI.
        theme: Mermaid theme (``dark`` or ``default``).
        timeout: Seconds to wait for one diagram before giving up.
    """

    def __init__(
        self,
        command: str = "mmdc",
        theme: str = "dark",
        timeout: float = 30.0,
    ) -> None:
        self.command = command
        self.theme = theme
        self.timeout = timeout

    async def __call__(self, source: str, diagram_id: str) -> str:
        return await run_sync(self.render_blocking, source, diagram_id)

    def render_blocking(self, source: str, diagram_id: str) -> str:
        """Render one diagram synchronously and return the SVG text.

        Raises:
            DiagramRenderError: If the CLI is missing, fails, or times out.
        """
        executable = shutil.which(self.command)
        if executable is None:
            raise DiagramRenderError(
                f"Mermaid CLI '{self.command}' not found on PATH"
            )

        with tempfile.TemporaryDirectory(prefix="mdmirror-") as tmp:
            input_path = Path(tmp) / f"{diagram_id}.mmd"
            output_path = Path(tmp) / f"{diagram_id}.svg"
            input_path.write_text(source, encoding="utf-8")

            cmd = [
                executable,
                "-i",
                str(input_path),
                "-o",
                str(output_path),
                "-t",
                self.theme,
                "-b",
                "transparent",
            ]
            logger.debug("Rendering diagram %s: %s", diagram_id, cmd)
            try:
                proc = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    check=False,
                )
            except subprocess.TimeoutExpired as exc:
                raise DiagramRenderError(
                    f"Mermaid CLI timed out after {self.timeout:g}s"
                ) from exc

            if proc.returncode != 0:
                raise DiagramRenderError(
                    _first_error_line(proc.stderr)
                    or f"Mermaid CLI exited with code {proc.returncode}"
                )
            if not output_path.exists():
                raise DiagramRenderError("Mermaid CLI produced no output")
            return output_path.read_text(encoding="utf-8")


def _first_error_line(stderr: str | None) -> str:
    for line in (stderr or "").splitlines():
        line = line.strip()
        if line:
            return line
    return ""
