"""Utilities for assembling page contexts, rendering pages, and building sites."""

from .context import PageContextAssembler
from .models import PageContext
from .renderer import MarkdownConverter, TemplateRenderer, build_renderer
from .site_builder import BuildResult, SiteBuilder

__all__ = [
    "BuildResult",
    "MarkdownConverter",
    "PageContext",
    "PageContextAssembler",
    "SiteBuilder",
    "TemplateRenderer",
    "build_renderer",
]
