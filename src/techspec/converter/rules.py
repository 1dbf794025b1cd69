"""
Rule table for Markdown to wiki markup conversion.

A Dialect maps each ConstructKind to a pure formatting function. The
converter classifies a Markdown line into a Construct and asks the dialect
to format it; adding a dialect never touches the converter.

Architecture:
    ::

        Markdown line ──► MarkupConverter._classify() ──► Construct(kind, ...)
                                                              │
                                                              ▼
                                          Dialect.formatters[kind](construct)
                                                              │
                                                              ▼
                                                wiki line (None = dropped)

Tags:
    converter, markup, confluence, rules, techspec
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable


class ConstructKind(str, Enum):
    """Structural units the converter recognizes."""

    HEADING = "heading"
    UNORDERED_ITEM = "unordered_item"
    ORDERED_ITEM = "ordered_item"
    TABLE_HEADER = "table_header"
    TABLE_SEPARATOR = "table_separator"
    TABLE_ROW = "table_row"
    CODE_FENCE_OPEN = "code_fence_open"
    CODE_FENCE_CLOSE = "code_fence_close"
    CODE_LINE = "code_line"
    BLOCKQUOTE = "blockquote"
    HORIZONTAL_RULE = "horizontal_rule"
    BLANK = "blank"
    PARAGRAPH = "paragraph"


@dataclass
class Construct:
    """A classified source line.

    Attributes:
        kind: Construct kind
        text: Text payload (heading text, item text, paragraph, code line)
        level: Heading level
        markers: List kinds from outermost to this item ("unordered"/"ordered")
        cells: Table cells
        language: Code fence language tag (lowercased, may be empty)
    """

    kind: ConstructKind
    text: str = ""
    level: int = 0
    markers: list[str] = field(default_factory=list)
    cells: list[str] = field(default_factory=list)
    language: str = ""

    @property
    def depth(self) -> int:
        return len(self.markers)


Formatter = Callable[[Construct], "str | None"]


@dataclass
class Dialect:
    """Target markup dialect.

    Attributes:
        name: Dialect name
        formatters: ConstructKind -> formatting function (None drops the line)
        inline: Inline span conversion applied to text payloads
        passthrough: Lines already written in this dialect; copied unchanged
        verbatim_toggles: Lines that open and close a verbatim block in this dialect
    """

    name: str
    formatters: dict[ConstructKind, Formatter]
    inline: Callable[[str], str]
    passthrough: tuple[re.Pattern, ...] = ()
    verbatim_toggles: tuple[re.Pattern, ...] = ()

    def format(self, construct: Construct) -> str | None:
        return self.formatters[construct.kind](construct)

    def is_native(self, line: str) -> bool:
        return any(pattern.match(line) for pattern in self.passthrough)

    def toggles_verbatim(self, line: str) -> re.Pattern | None:
        for pattern in self.verbatim_toggles:
            if pattern.match(line):
                return pattern
        return None


# =============================================================================
# Markdown source patterns
# =============================================================================

FENCE_RE = re.compile(r"^\s*(?P<fence>`{3,}|~{3,})\s*(?P<lang>[^\s`]*)(?:\s+[^`]*)?\s*$")
HEADING_RE = re.compile(r"^(?P<hashes>#{1,6})\s+(?P<text>.*?)(?:\s+#+)?\s*$")
EMPTY_HEADING_RE = re.compile(r"^(?P<hashes>#{1,6})\s*$")
HORIZONTAL_RULE_RE = re.compile(r"^\s{0,3}([-*_])(?:\s*\1){2,}\s*$")
TABLE_SEPARATOR_RE = re.compile(r"^\s*\|?\s*:?-+:?\s*(?:\|\s*:?-+:?\s*)+\|?\s*$|^\s*\|\s*:?-+:?\s*\|\s*$")
TABLE_ROW_RE = re.compile(r"^\s*\|.*$")
UNORDERED_RE = re.compile(r"^(?P<indent>[ \t]*)[-*+]\s+(?P<text>.*)$")
ORDERED_RE = re.compile(r"^(?P<indent>[ \t]*)\d+[.)]\s+(?P<text>.*)$")
BLOCKQUOTE_RE = re.compile(r"^\s*>\s?(?P<text>.*)$")

# Markup-like lines with no rule: raw HTML, footnotes, reference links,
# setext underlines, headings deeper than six levels
UNSUPPORTED_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    ("html", re.compile(r"^\s*</?[A-Za-z][A-Za-z0-9-]*(\s[^>]*)?/?>")),
    ("html_comment", re.compile(r"^\s*<!--")),
    ("footnote", re.compile(r"^\s*\[\^[^\]]+\]:")),
    ("reference_link", re.compile(r"^\s*\[[^\]]+\]:\s+\S")),
    ("setext_heading", re.compile(r"^\s*=+\s*$")),
    ("deep_heading", re.compile(r"^#{7,}")),
)


def split_table_cells(line: str) -> list[str]:
    """Split a Markdown table row into stripped cells.

    Escaped pipes (``\\|``) stay inside their cell.
    """
    inner = line.strip()
    if inner.startswith("|"):
        inner = inner[1:]
    if inner.endswith("|") and not inner.endswith("\\|"):
        inner = inner[:-1]
    return [cell.strip() for cell in re.split(r"(?<!\\)\|", inner)]


# =============================================================================
# Confluence wiki dialect
# =============================================================================

_CODE_SPAN_RE = re.compile(r"(`+)(.+?)\1")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)\s]+)(?:\s+\"[^\"]*\")?\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)\s]+)(?:\s+\"[^\"]*\")?\)")
_AUTOLINK_RE = re.compile(r"<((?:https?|mailto):[^>\s]+)>")
_ITALIC_STAR_RE = re.compile(r"(?<![*\w])\*(?![\s*])(.+?)(?<![\s*])\*(?![*\w])")
_BOLD_STAR_RE = re.compile(r"\*\*(?!\s)(.+?)(?<!\s)\*\*")
_BOLD_UNDERSCORE_RE = re.compile(r"(?<!\w)__(?!\s)(.+?)(?<!\s)__(?!\w)")
_STRIKE_RE = re.compile(r"~~(?!\s)(.+?)(?<!\s)~~")
_PLACEHOLDER_RE = re.compile("\x00(\\d+)\x00")

_LANGUAGE_ALIASES = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "sh": "bash",
    "shell": "bash",
    "zsh": "bash",
    "yml": "yaml",
    "kt": "kotlin",
    "cs": "c#",
    "csharp": "c#",
    "c++": "cpp",
}


def confluence_inline(text: str) -> str:
    """Convert inline Markdown spans to Confluence wiki spans.

    Code spans are protected first so their contents never change.
    """
    spans: list[str] = []

    def _stash(match: re.Match) -> str:
        spans.append(match.group(2).strip())
        return f"\x00{len(spans) - 1}\x00"

    text = _CODE_SPAN_RE.sub(_stash, text)
    text = _IMAGE_RE.sub(lambda m: f"!{m.group(2)}!", text)
    text = _LINK_RE.sub(lambda m: f"[{m.group(1)}|{m.group(2)}]", text)
    text = _AUTOLINK_RE.sub(lambda m: f"[{m.group(1)}]", text)
    # Single-star italics before bold, or bold output would be re-read as italics
    text = _ITALIC_STAR_RE.sub(lambda m: f"_{m.group(1)}_", text)
    text = _BOLD_STAR_RE.sub(lambda m: f"*{m.group(1)}*", text)
    text = _BOLD_UNDERSCORE_RE.sub(lambda m: f"*{m.group(1)}*", text)
    text = _STRIKE_RE.sub(lambda m: f"-{m.group(1)}-", text)
    return _PLACEHOLDER_RE.sub(lambda m: "{{" + spans[int(m.group(1))] + "}}", text)


def confluence_dialect(code_languages: Iterable[str] | None = None) -> Dialect:
    """Build the Confluence wiki dialect.

    Args:
        code_languages: Fence languages emitted as ``{code:language=...}``;
            any other tag falls back to a plain ``{code}`` block
    """
    languages = {lang.lower() for lang in (code_languages or ())}
    list_tokens = {"unordered": "*", "ordered": "#"}

    def heading(c: Construct) -> str:
        return f"h{c.level}. {confluence_inline(c.text)}".rstrip()

    def list_item(c: Construct) -> str:
        prefix = "".join(list_tokens[m] for m in c.markers)
        return f"{prefix} {confluence_inline(c.text)}"

    def table_header(c: Construct) -> str:
        return "||" + "||".join(confluence_inline(cell) or " " for cell in c.cells) + "||"

    def table_row(c: Construct) -> str:
        return "|" + "|".join(confluence_inline(cell) or " " for cell in c.cells) + "|"

    def fence_open(c: Construct) -> str:
        language = _LANGUAGE_ALIASES.get(c.language, c.language)
        if language and language in languages:
            return f"{{code:language={language}}}"
        return "{code}"

    formatters: dict[ConstructKind, Formatter] = {
        ConstructKind.HEADING: heading,
        ConstructKind.UNORDERED_ITEM: list_item,
        ConstructKind.ORDERED_ITEM: list_item,
        ConstructKind.TABLE_HEADER: table_header,
        ConstructKind.TABLE_SEPARATOR: lambda c: None,
        ConstructKind.TABLE_ROW: table_row,
        ConstructKind.CODE_FENCE_OPEN: fence_open,
        ConstructKind.CODE_FENCE_CLOSE: lambda c: "{code}",
        ConstructKind.CODE_LINE: lambda c: c.text,
        ConstructKind.BLOCKQUOTE: lambda c: f"bq. {confluence_inline(c.text)}".rstrip(),
        ConstructKind.HORIZONTAL_RULE: lambda c: "----",
        ConstructKind.BLANK: lambda c: "",
        ConstructKind.PARAGRAPH: lambda c: confluence_inline(c.text),
    }

    return Dialect(
        name="confluence",
        formatters=formatters,
        inline=confluence_inline,
        passthrough=(
            re.compile(r"^h[1-6]\.\s"),
            re.compile(r"^\s*\|\|.*\|\|\s*$"),
            re.compile(r"^bq\.\s"),
            re.compile(r"^-{4,}\s*$"),
        ),
        verbatim_toggles=(
            re.compile(r"^\s*\{code(?::[^}]*)?\}\s*$"),
            re.compile(r"^\s*\{noformat\}\s*$"),
        ),
    )


DEFAULT_CODE_LANGUAGES = (
    "bash", "c#", "cpp", "css", "diff", "go", "html", "java", "javascript",
    "json", "kotlin", "python", "ruby", "sql", "swift", "typescript", "xml", "yaml",
)

CONFLUENCE = confluence_dialect(DEFAULT_CODE_LANGUAGES)

# Construct -> Markdown example, used for the printed conversion table
CONVERSION_EXAMPLES: tuple[tuple[ConstructKind, str], ...] = (
    (ConstructKind.HEADING, "## Goal"),
    (ConstructKind.UNORDERED_ITEM, "- item"),
    (ConstructKind.UNORDERED_ITEM, "- item\n  - nested item"),
    (ConstructKind.ORDERED_ITEM, "1. step\n   - detail"),
    (ConstructKind.TABLE_HEADER, "| A | B |\n|---|---|"),
    (ConstructKind.TABLE_ROW, "| 1 | 2 |"),
    (ConstructKind.CODE_FENCE_OPEN, "```sql\nSELECT 1;\n```"),
    (ConstructKind.BLOCKQUOTE, "> note"),
    (ConstructKind.HORIZONTAL_RULE, "---"),
    (ConstructKind.PARAGRAPH, "**bold** *italic* `code` [link](https://example.com)"),
)
