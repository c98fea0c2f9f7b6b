"""Forward rendering: Markdown text to rendered tree, diagrams included."""

from .diagrams import (
    DiagramRenderError,
    DiagramRenderer,
    MermaidCliRenderer,
    diagram_theme,
)
from .pipeline import RenderPipeline

__all__ = [
    "DiagramRenderError",
    "DiagramRenderer",
    "MermaidCliRenderer",
    "RenderPipeline",
    "diagram_theme",
]
