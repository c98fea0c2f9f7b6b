"""Event-loop helpers shared by the render pipeline and the sync coordinator."""

from .async_utils import run_sync
from .debounce import Debouncer

__all__ = ["Debouncer", "run_sync"]
