"""Forward render pipeline: Markdown text -> rendered tree.

Steps for one pass:

1. Parse the text into a tree (task-list markers become checkboxes).
2. Find every code block whose language is the diagram language.
3. Hand each block to the diagram renderer, one at a time and in document
   order, replacing it with a diagram container on success or an inline
   error element on failure.

Diagram failures never abort the pass.  Passes are serialised by a lock, so
the diagram id counter is only ever advanced by one pass at a time.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from ..converters.common import DEFAULT_DIAGRAM_LANGUAGE
from ..converters.markdown_to_tree import markdown_to_tree
from ..tree.html import to_html
from ..tree.nodes import Element, NodeKind, Text, element, iter_slots, text_content
from .diagrams import DiagramRenderer

logger = logging.getLogger(__name__)


class RenderPipeline:
    """Render Markdown to a tree, materialising diagrams along the way.

    Args:
        diagram_renderer: ``await renderer(source, diagram_id) -> svg``;
            None leaves diagram blocks as plain code blocks.
        diagram_language: Code fence language that marks a diagram block.
        hard_breaks: Passed to the Markdown step.
        parse: Markdown step override, ``text -> Element``.
        id_prefix: Prefix for generated diagram ids.
    """

    def __init__(
        self,
        diagram_renderer: DiagramRenderer | None,
        diagram_language: str = DEFAULT_DIAGRAM_LANGUAGE,
        hard_breaks: bool = True,
        parse: Callable[[str], Element] | None = None,
        id_prefix: str = "mermaid",
    ) -> None:
        self.diagram_renderer = diagram_renderer
        self.diagram_language = diagram_language
        self.hard_breaks = hard_breaks
        self.id_prefix = id_prefix
        self._parse = parse
        self._lock = asyncio.Lock()
        self.diagram_counter = 0

    def parse(self, text: str) -> Element:
        """Run only the Markdown step (no diagrams)."""
        if self._parse is not None:
            return self._parse(text)
        return markdown_to_tree(text, hard_breaks=self.hard_breaks)

    async def render(self, text: str) -> Element:
        """Run a full forward pass and return the finished tree."""
        async with self._lock:
            tree = self.parse(text)
            count = await self.materialize_diagrams(tree)
            if count:
                logger.debug("Materialised %d diagram block(s)", count)
            return tree

    async def render_html(self, text: str) -> str:
        """Run a full forward pass and serialise the result as HTML."""
        return to_html(await self.render(text))

    def is_diagram_block(self, node: object) -> bool:
        return (
            isinstance(node, Element)
            and node.kind is NodeKind.CODE_BLOCK
            and node.get("language") == self.diagram_language
        )

    async def materialize_diagrams(self, tree: Element) -> int:
        """Replace diagram code blocks in *tree*, sequentially, in place.

        Returns:
            Number of diagram blocks processed.
        """
        if self.diagram_renderer is None:
            return 0
        slots = [
            (parent, index)
            for parent, index in iter_slots(tree)
            if self.is_diagram_block(parent.children[index])
        ]
        for parent, index in slots:
            source = text_content(parent.children[index])
            parent.children[index] = await self._materialize(source)
        return len(slots)

    async def _materialize(self, source: str) -> Element:
        self.diagram_counter += 1
        diagram_id = f"{self.id_prefix}-{self.diagram_counter}"
        try:
            svg = await self.diagram_renderer(source, diagram_id)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            logger.warning(
                "Diagram %s failed to render: %s", diagram_id, message
            )
            return element(
                NodeKind.DIAGRAM_ERROR,
                Text(f"Diagram render error: {message}"),
                message=message,
                diagram_id=diagram_id,
            )
        return element(
            NodeKind.DIAGRAM_CONTAINER, diagram_id=diagram_id, markup=svg
        )
