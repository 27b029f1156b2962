"""Backend package - renders Go fragments as source text."""

from .go import GoRenderer, RenderError, collect_imports, render

__all__ = ["GoRenderer", "RenderError", "collect_imports", "render"]
