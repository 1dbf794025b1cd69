"""
Tech Spec Package

Renders Tech Spec design documents from structured section content, in a
fixed section order, and converts Markdown to wiki markup.

Example:
    >>> from techspec import TechSpecRenderer
    >>> renderer = TechSpecRenderer()
    >>> document = renderer.render({"problem_statement": "...", "goal": ["..."], ...})
"""

from techspec.config import TechSpecConfig
from techspec.converter import MarkupConverter, convert_markdown
from techspec.errors import (
    MissingRequiredSectionError,
    TechSpecError,
    UnknownMarkupConstructError,
)
from techspec.renderers import GuideRenderer, TechSpecRenderer
from techspec.builder import TechSpecBuilder

__version__ = "0.1.0"

__all__ = [
    "TechSpecConfig",
    "MarkupConverter",
    "convert_markdown",
    "TechSpecError",
    "MissingRequiredSectionError",
    "UnknownMarkupConstructError",
    "TechSpecRenderer",
    "GuideRenderer",
    "TechSpecBuilder",
    "__version__",
]
