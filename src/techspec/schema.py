"""
Section schema for the Tech Spec document.

The schema is a fixed, ordered tuple of SectionSpec entries. Renderers
iterate it exactly once; a section's position in the tuple is its position
in every generated document.

Architecture:
    ::

        TECH_SPEC_SCHEMA
          metadata ─► problem_statement ─► goal ─► proposed_solution ─► changes
            ─► [architecture_diagrams] ─► [schema_specification]
            ─► [api_specification] ─► [ui_flow] ─► risk ─► [security_privacy]
            ─► alternatives ─► implementation_plan ─► metrics
            ─► quality_attributes ─► follow_up

        [...] = conditional/optional, omitted when absent

Guardrails:
    - Do NOT reorder entries; document order depends on tuple order
    - Mandatory sections with a default never raise as missing

Tags:
    schema, sections, ordering, techspec
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator

from techspec.errors import UnknownSectionError


class SectionRequirement(str, Enum):
    """How a section participates in the document."""

    MANDATORY = "mandatory"       # Always rendered; missing content is an error
    CONDITIONAL = "conditional"   # Rendered only when the change touches this area
    OPTIONAL = "optional"         # Rendered only when the author supplies it


def has_content(value: Any) -> bool:
    """Presence predicate shared by optional and conditional sections.

    None, blank strings, and empty collections count as absent.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) > 0
    return True


@dataclass(frozen=True)
class SectionSpec:
    """One entry of the document schema.

    Attributes:
        key: Content mapping key
        title: Heading text
        requirement: Mandatory, conditional, or optional
        level: Markdown heading level (0 means no heading is emitted)
        default: Factory producing content when a mandatory section is absent
        is_present: Presence predicate for conditional and optional sections
    """

    key: str
    title: str
    requirement: SectionRequirement
    level: int = 2
    default: Callable[[], Any] | None = None
    is_present: Callable[[Any], bool] = has_content

    @property
    def mandatory(self) -> bool:
        return self.requirement is SectionRequirement.MANDATORY

    @property
    def heading(self) -> str:
        """Markdown heading line, or empty string for headless sections."""
        if self.level <= 0:
            return ""
        return f"{'#' * self.level} {self.title}"


def _mandatory(key: str, title: str, **kwargs: Any) -> SectionSpec:
    return SectionSpec(key, title, SectionRequirement.MANDATORY, **kwargs)


def _conditional(key: str, title: str, **kwargs: Any) -> SectionSpec:
    return SectionSpec(key, title, SectionRequirement.CONDITIONAL, **kwargs)


def _optional(key: str, title: str, **kwargs: Any) -> SectionSpec:
    return SectionSpec(key, title, SectionRequirement.OPTIONAL, **kwargs)


# Metadata defaults are filled from TechSpecConfig by the renderer; the empty
# mapping here only marks the section as never missing.
TECH_SPEC_SCHEMA: tuple[SectionSpec, ...] = (
    _mandatory("metadata", "Metadata", level=0, default=dict),
    _mandatory("problem_statement", "Problem Statement"),
    _mandatory("goal", "Goal"),
    _mandatory("proposed_solution", "Proposed Solution", default=str),
    _mandatory("changes", "Changes", level=3),
    _conditional("architecture_diagrams", "Architecture Diagrams"),
    _conditional("schema_specification", "Schema Specification"),
    _conditional("api_specification", "API Specification"),
    _conditional("ui_flow", "UI Flow"),
    _mandatory("risk", "Risk"),
    _optional("security_privacy", "Security/Privacy"),
    _mandatory("alternatives", "Alternatives"),
    _mandatory("implementation_plan", "Implementation Plan"),
    _mandatory("metrics", "Metrics"),
    _mandatory("quality_attributes", "Quality Attributes"),
    _mandatory("follow_up", "Follow Up"),
)

QUALITY_ATTRIBUTES: tuple[str, ...] = (
    "Security",
    "Capacity",
    "Compatibility",
    "Reliability",
    "Scalability",
    "Maintainability",
    "Usability",
)

# Top-level content keys that are not sections
DOCUMENT_KEYS: frozenset[str] = frozenset({"title"})

_BY_KEY = {spec.key: spec for spec in TECH_SPEC_SCHEMA}


def iter_sections() -> Iterator[SectionSpec]:
    """Iterate sections in document order."""
    return iter(TECH_SPEC_SCHEMA)


def get_section(key: str) -> SectionSpec:
    """Look up a section by key.

    Raises:
        UnknownSectionError: If the key is not in the schema
    """
    try:
        return _BY_KEY[key]
    except KeyError:
        raise UnknownSectionError(key) from None


def is_section_key(key: str) -> bool:
    return key in _BY_KEY


def mandatory_keys() -> list[str]:
    """Keys of mandatory sections, in document order."""
    return [spec.key for spec in TECH_SPEC_SCHEMA if spec.mandatory]


def required_keys() -> list[str]:
    """Mandatory keys the author must supply (no default available)."""
    return [spec.key for spec in TECH_SPEC_SCHEMA if spec.mandatory and spec.default is None]


def optional_keys() -> list[str]:
    """Keys of conditional and optional sections, in document order."""
    return [spec.key for spec in TECH_SPEC_SCHEMA if not spec.mandatory]
