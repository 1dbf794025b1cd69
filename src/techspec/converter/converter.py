"""
Line-based Markdown to wiki markup converter.

Example:
    >>> converter = MarkupConverter()
    >>> converter.convert("## Goal\\n\\n- **Fast** checkout\\n")
    'h2. Goal\\n\\n* *Fast* checkout\\n'
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from techspec.converter.rules import (
    BLOCKQUOTE_RE,
    CONFLUENCE,
    CONVERSION_EXAMPLES,
    EMPTY_HEADING_RE,
    FENCE_RE,
    HEADING_RE,
    HORIZONTAL_RULE_RE,
    ORDERED_RE,
    TABLE_ROW_RE,
    TABLE_SEPARATOR_RE,
    UNORDERED_RE,
    UNSUPPORTED_PATTERNS,
    Construct,
    ConstructKind,
    Dialect,
    confluence_dialect,
    split_table_cells,
)
from techspec.errors import UnknownMarkupConstructError
from techspec.logging import get_logger

if TYPE_CHECKING:
    from techspec.config import TechSpecConfig

logger = get_logger(__name__)


class MarkupConverter:
    """Convert Markdown text to a wiki markup dialect, one line at a time.

    Manifesto:
        Source constructs map one-to-one onto target tokens, so no grammar
        or AST is needed. The converter only tracks the state a line cannot
        carry by itself: whether it sits inside a code block, the kinds of
        the enclosing list items, and whether a table row is a header.

    Architecture:
        ```
        text ──► split("\\n") ──► for each line:
                                    inside code block? ──► verbatim
                                    native dialect line? ──► unchanged
                                    _classify() ──► Construct
                                    Dialect.format() ──► wiki line
        ```

    Features:
        - Headings h1-h6, nested and mixed ordered/unordered lists
        - Tables (header row detected by the following separator row)
        - Fenced code blocks with language mapping
        - Inline bold, italic, strikethrough, code, links, images
        - Lines already in the target dialect pass through unchanged
        - Unrecognized markup passes through unchanged (or raises when strict)

    Guardrails:
        - List depth is indentation // list_indent + 1, but never more than
          one level deeper than the previous item
        - A "---" line is always a horizontal rule; setext headings are
          reported as unknown markup

    Tags:
        - converter
        - markup
        - confluence
    """

    def __init__(
        self,
        dialect: Dialect | None = None,
        list_indent: int = 2,
        strict: bool = False,
    ):
        """Initialize the converter.

        Args:
            dialect: Target dialect (Confluence wiki markup by default)
            list_indent: Spaces per list nesting level (a tab counts as one level)
            strict: Raise UnknownMarkupConstructError instead of passing lines through
        """
        if list_indent < 1:
            raise ValueError("list_indent must be a positive integer")
        self.dialect = dialect or CONFLUENCE
        self.list_indent = list_indent
        self.strict = strict
        self.unknown_lines: list[UnknownMarkupConstructError] = []
        self._list_markers: list[str] = []

    @classmethod
    def from_config(cls, config: TechSpecConfig, strict: bool | None = None) -> MarkupConverter:
        """Create a converter from TechSpecConfig values."""
        return cls(
            dialect=confluence_dialect(config.code_languages),
            list_indent=config.list_indent,
            strict=config.strict_markup if strict is None else strict,
        )

    def convert(self, text: str) -> str:
        """Convert a Markdown document.

        Args:
            text: Markdown source

        Returns:
            The same content in the target dialect; blank lines and the
            trailing newline are preserved

        Raises:
            UnknownMarkupConstructError: In strict mode, on the first
                unrecognized markup line
        """
        self.unknown_lines = []
        self._list_markers = []

        lines = text.split("\n")
        out: list[str] = []
        fence: str | None = None
        verbatim = None

        for index, line in enumerate(lines):
            if verbatim is not None:
                out.append(line)
                if verbatim.match(line):
                    verbatim = None
                continue

            if fence is not None:
                if self._closes_fence(line, fence):
                    out.append(self.dialect.format(Construct(ConstructKind.CODE_FENCE_CLOSE)))
                    fence = None
                else:
                    out.append(self.dialect.format(Construct(ConstructKind.CODE_LINE, text=line)))
                continue

            toggle = self.dialect.toggles_verbatim(line)
            if toggle is not None:
                self._list_markers = []
                verbatim = toggle
                out.append(line)
                continue

            if self.dialect.is_native(line):
                self._list_markers = []
                out.append(line)
                continue

            next_line = lines[index + 1] if index + 1 < len(lines) else None
            try:
                construct = self._classify(line, index + 1, next_line)
            except UnknownMarkupConstructError as e:
                if self.strict:
                    raise
                self.unknown_lines.append(e)
                logger.warning(
                    "unknown_markup_construct",
                    line_number=e.line_number,
                    construct=e.context.construct,
                    line=line.strip(),
                )
                self._list_markers = []
                out.append(line)
                continue

            if construct.kind is ConstructKind.CODE_FENCE_OPEN:
                fence = construct.text

            formatted = self.dialect.format(construct)
            if formatted is not None:
                out.append(formatted)

        if fence is not None:
            logger.warning("unclosed_code_fence", fence=fence)
            closing = self.dialect.format(Construct(ConstructKind.CODE_FENCE_CLOSE))
            if len(out) > 1 and out[-1] == "":
                out.insert(len(out) - 1, closing)
            else:
                out.append(closing)

        return "\n".join(out)

    def _classify(self, line: str, line_number: int, next_line: str | None) -> Construct:
        """Classify one line outside code blocks."""
        if not line.strip():
            self._list_markers = []
            return Construct(ConstructKind.BLANK)

        match = FENCE_RE.match(line)
        if match:
            self._list_markers = []
            return Construct(
                ConstructKind.CODE_FENCE_OPEN,
                text=match.group("fence"),
                language=match.group("lang").lower(),
            )

        for name, pattern in UNSUPPORTED_PATTERNS:
            if pattern.match(line):
                raise UnknownMarkupConstructError(line, line_number=line_number, construct=name)

        match = HEADING_RE.match(line) or EMPTY_HEADING_RE.match(line)
        if match:
            self._list_markers = []
            text = match.groupdict().get("text") or ""
            return Construct(ConstructKind.HEADING, text=text, level=len(match.group("hashes")))

        if HORIZONTAL_RULE_RE.match(line):
            self._list_markers = []
            return Construct(ConstructKind.HORIZONTAL_RULE)

        if TABLE_SEPARATOR_RE.match(line):
            self._list_markers = []
            return Construct(ConstructKind.TABLE_SEPARATOR)

        if TABLE_ROW_RE.match(line):
            self._list_markers = []
            is_header = next_line is not None and bool(TABLE_SEPARATOR_RE.match(next_line))
            kind = ConstructKind.TABLE_HEADER if is_header else ConstructKind.TABLE_ROW
            return Construct(kind, cells=split_table_cells(line))

        for pattern, marker, kind in (
            (UNORDERED_RE, "unordered", ConstructKind.UNORDERED_ITEM),
            (ORDERED_RE, "ordered", ConstructKind.ORDERED_ITEM),
        ):
            match = pattern.match(line)
            if match:
                markers = self._nest(match.group("indent"), marker)
                return Construct(kind, text=match.group("text").strip(), markers=markers)

        match = BLOCKQUOTE_RE.match(line)
        if match:
            self._list_markers = []
            return Construct(ConstructKind.BLOCKQUOTE, text=match.group("text"))

        self._list_markers = []
        return Construct(ConstructKind.PARAGRAPH, text=line)

    def _nest(self, indent: str, marker: str) -> list[str]:
        """Update the list stack for an item and return its marker chain."""
        width = sum(self.list_indent if ch == "\t" else 1 for ch in indent)
        depth = min(width // self.list_indent + 1, len(self._list_markers) + 1)
        self._list_markers = self._list_markers[:depth - 1] + [marker]
        return list(self._list_markers)

    @staticmethod
    def _closes_fence(line: str, fence: str) -> bool:
        stripped = line.strip()
        return (
            len(stripped) >= len(fence)
            and set(stripped) == {fence[0]}
        )


def convert_markdown(text: str, **kwargs: Any) -> str:
    """Convert Markdown with a one-off MarkupConverter."""
    return MarkupConverter(**kwargs).convert(text)


def conversion_table(converter: MarkupConverter | None = None) -> list[tuple[str, str, str]]:
    """Static conversion lookup table.

    Returns:
        (construct, markdown example, converted example) rows, computed by
        running the converter on each example
    """
    converter = converter or MarkupConverter()
    rows = []
    for kind, example in CONVERSION_EXAMPLES:
        rows.append((kind.value, example, converter.convert(example)))
    return rows
