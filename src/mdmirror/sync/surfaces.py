"""Host-facing surfaces the coordinator reads from and writes to.

The coordinator only relies on the small contracts below.  A host (GUI
toolkit, web bridge, test harness) adapts its own widgets to them; the
in-memory implementations are what the CLI and the test-suite use.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from ..tree.nodes import Element, root

ChangeListener = Callable[[str], None]


class TextBuffer(Protocol):
    """The text-editing component that owns the Markdown source."""

    @property
    def text(self) -> str: ...

    def replace(self, text: str) -> None:
        """Overwrite the whole document, notifying change listeners."""
        ...

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register *listener*; returns a function that unregisters it."""
        ...


class InMemoryTextBuffer:
    """Plain string buffer that notifies listeners synchronously on change.

    ``revision`` counts writes, so callers can tell whether a write happened
    at all (not only whether the text changed).
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._listeners: list[ChangeListener] = []
        self.revision = 0

    @property
    def text(self) -> str:
        return self._text

    def replace(self, text: str) -> None:
        self._text = text
        self.revision += 1
        for listener in list(self._listeners):
            listener(text)

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


class PreviewSurface:
    """The editable rendered view.

    ``root`` is the live tree: user edits mutate it in place and the
    structural converter reads it back.  ``replace()`` swaps in a freshly
    rendered tree unless it is equal to what is already shown.
    """

    def __init__(self, tree: Element | None = None) -> None:
        self.root = tree if tree is not None else root()
        self.focused = False
        self.revision = 0

    def replace(self, tree: Element) -> bool:
        """Show *tree*.  Returns False when it equals the current content."""
        if tree == self.root:
            return False
        self.root = tree
        self.revision += 1
        return True


@dataclass
class ScrollSurface:
    """Scroll geometry of one scrollable container, in pixels."""

    scroll_top: float = 0.0
    scroll_height: float = 0.0
    client_height: float = 0.0

    @property
    def max_scroll(self) -> float:
        return self.scroll_height - self.client_height

    def fraction(self) -> float:
        """Current position as a fraction of the scrollable range."""
        return self.scroll_top / max(self.max_scroll, 1)

    def scroll_to_fraction(self, fraction: float) -> None:
        self.scroll_top = fraction * self.max_scroll
