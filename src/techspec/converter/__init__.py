"""
Markup conversion module.

Converts Markdown to a wiki markup dialect with a line-based,
table-driven converter.
"""

from techspec.converter.converter import MarkupConverter, conversion_table, convert_markdown
from techspec.converter.rules import (
    CONFLUENCE,
    Construct,
    ConstructKind,
    Dialect,
    confluence_dialect,
    confluence_inline,
)

__all__ = [
    "MarkupConverter",
    "conversion_table",
    "convert_markdown",
    "CONFLUENCE",
    "Construct",
    "ConstructKind",
    "Dialect",
    "confluence_dialect",
    "confluence_inline",
]
