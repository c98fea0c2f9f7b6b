"""Live two-way synchronisation between a Markdown buffer and its rendered view."""

__version__ = "0.3.0"
