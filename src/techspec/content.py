"""Pydantic models for Tech Spec section content.

Authors supply content as a mapping keyed by section (usually a YAML answers
file). Each section's raw value is validated into a typed model here, so the
templates only ever see well-formed data.

Usage::

    from techspec.content import load_content, normalize_content

    content = normalize_content(load_content("payments.yaml"))
    content.sections["risk"][0].mitigation

Example YAML::

    title: Payment Retries
    problem_statement: Failed card payments are never retried.
    goal:
      - Recover 30% of failed payments within 7 days
    changes:
      - Add a retry scheduler
    risk:
      - [Duplicate charges, Low, High, Idempotency keys per attempt]
    quality_attributes:
      reliability:
        definition: Retries survive worker restarts
        metric: 0 lost retries per week

Table rows may be written as mappings or as positional lists; a bare string
fills the row's first column. Scalars such as dates and numbers are kept as
text.

Tags:
    content, validation, pydantic, yaml, techspec
"""

from __future__ import annotations

import datetime
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, ClassVar, Mapping

import yaml
from pydantic import BaseModel, BeforeValidator, ConfigDict, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from techspec.errors import ContentLoadError, InvalidSectionContentError
from techspec.logging import get_logger
from techspec.schema import DOCUMENT_KEYS, QUALITY_ATTRIBUTES, has_content, is_section_key, iter_sections

logger = get_logger(__name__)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(f"expected text, got {type(value).__name__}")


def _to_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    if isinstance(value, tuple):
        return list(value)
    return value


Text = Annotated[str, BeforeValidator(_to_text)]
TextList = Annotated[list[Text], BeforeValidator(_to_list)]


class _Row(BaseModel):
    """A table row that accepts a mapping, a positional list, or a bare string."""

    model_config = ConfigDict(extra="forbid")

    # Field a bare string is assigned to (first field when None)
    scalar_field: ClassVar[str | None] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_row(cls, data: Any) -> Any:
        names = list(cls.model_fields)
        if isinstance(data, (list, tuple)):
            if len(data) > len(names):
                raise ValueError(f"expected at most {len(names)} columns ({', '.join(names)}), got {len(data)}")
            return dict(zip(names, data))
        if isinstance(data, (str, int, float, datetime.date)):
            return {cls.scalar_field or names[0]: data}
        return data


# =============================================================================
# Row / block models
# =============================================================================


class ChangelogEntry(_Row):
    """One line of the document's revision history."""

    version: Text
    date: Text = ""
    description: Text = ""


class Metadata(BaseModel):
    """Document metadata; unset fields fall back to TechSpecConfig defaults."""

    model_config = ConfigDict(extra="forbid")

    title: Text | None = None
    date: Text | None = None
    owner: Text | None = None
    version: Text | None = None
    status: Text | None = None
    reviewers: TextList = []
    changelog: Annotated[list[ChangelogEntry], BeforeValidator(_to_list)] = []


class Diagram(_Row):
    """A diagram block: mermaid source, ASCII art, or a link."""

    scalar_field: ClassVar[str | None] = "body"

    title: Text = ""
    body: Text
    format: Text = "text"


class DDLBlock(_Row):
    scalar_field: ClassVar[str | None] = "sql"

    title: Text = ""
    sql: Text


class SchemaChange(_Row):
    table: Text
    change: Text = ""
    description: Text = ""


class SchemaSpecification(BaseModel):
    """DDL blocks plus a table summarizing each schema change."""

    model_config = ConfigDict(extra="forbid")

    ddl: Annotated[list[DDLBlock], BeforeValidator(_to_list)] = []
    changes: Annotated[list[SchemaChange], BeforeValidator(_to_list)] = []

    @model_validator(mode="before")
    @classmethod
    def _coerce_spec(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"ddl": [data]}
        return data

    @model_validator(mode="after")
    def _not_empty(self) -> SchemaSpecification:
        if not self.ddl and not self.changes:
            raise ValueError("schema specification needs ddl or changes")
        return self


class Endpoint(BaseModel):
    """One API endpoint: method, path, auth, and example payloads."""

    model_config = ConfigDict(extra="forbid")

    method: Text
    path: Text
    description: Text = ""
    auth: Text = ""
    request: dict[str, Any] | list[Any] | Text | None = None
    response: dict[str, Any] | list[Any] | Text | None = None

    @field_validator("method")
    @classmethod
    def _upper_method(cls, v: str) -> str:
        return v.strip().upper()


class UIFlow(BaseModel):
    """Numbered user steps plus the screens they touch."""

    model_config = ConfigDict(extra="forbid")

    steps: TextList
    screens: TextList = []

    @model_validator(mode="before")
    @classmethod
    def _coerce_flow(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple, str)):
            return {"steps": data}
        return data


class RiskItem(_Row):
    risk: Text
    likelihood: Text = ""
    impact: Text = ""
    mitigation: Text = ""


class ChecklistItem(_Row):
    item: Text
    done: bool = False


class Alternative(_Row):
    option: Text
    pros: Text = ""
    cons: Text = ""
    rejection_reason: Text = ""


class Phase(_Row):
    """One implementation phase with its tasks and dependencies."""

    name: Text
    tasks: TextList = []
    dependencies: TextList = []


class Metric(_Row):
    definition: Text
    kpi: Text = ""
    notes: Text = ""


class QualityAttribute(_Row):
    definition: Text = ""
    metric: Text = ""
    notes: Text = ""


class FollowUp(_Row):
    task: Text
    description: Text = ""
    estimate: Text = ""
    link: Text = ""
    date: Text = ""


def _list_of(model: type[BaseModel]) -> Any:
    return Annotated[list[model], BeforeValidator(_to_list)]


def _normalize_quality_attributes(value: dict[str, QualityAttribute]) -> dict[str, QualityAttribute]:
    canonical = {name.lower(): name for name in QUALITY_ATTRIBUTES}
    result: dict[str, QualityAttribute] = {}
    for name, attribute in value.items():
        key = canonical.get(name.strip().lower())
        if key is None:
            raise ValueError(
                f"unknown quality attribute {name!r}; expected one of {', '.join(QUALITY_ATTRIBUTES)}"
            )
        result[key] = attribute
    return result


# Section key -> validator for its raw content
SECTION_ADAPTERS: dict[str, TypeAdapter] = {
    "metadata": TypeAdapter(Metadata),
    "problem_statement": TypeAdapter(Text),
    "goal": TypeAdapter(TextList),
    "proposed_solution": TypeAdapter(Text),
    "changes": TypeAdapter(TextList),
    "architecture_diagrams": TypeAdapter(_list_of(Diagram)),
    "schema_specification": TypeAdapter(SchemaSpecification),
    "api_specification": TypeAdapter(_list_of(Endpoint)),
    "ui_flow": TypeAdapter(UIFlow),
    "risk": TypeAdapter(_list_of(RiskItem)),
    "security_privacy": TypeAdapter(Text | list[ChecklistItem]),
    "alternatives": TypeAdapter(_list_of(Alternative)),
    "implementation_plan": TypeAdapter(_list_of(Phase)),
    "metrics": TypeAdapter(_list_of(Metric)),
    "quality_attributes": TypeAdapter(dict[str, QualityAttribute]),
    "follow_up": TypeAdapter(_list_of(FollowUp)),
}


@dataclass
class TechSpecContent:
    """Validated section content, keyed by section key.

    Attributes:
        title: Document title from the content (None to use the config title)
        sections: Section key -> validated content, only for supplied sections
        ignored_keys: Top-level keys that matched no section
    """

    title: str | None = None
    sections: dict[str, Any] = field(default_factory=dict)
    ignored_keys: list[str] = field(default_factory=list)

    def __contains__(self, key: str) -> bool:
        return key in self.sections

    def get(self, key: str, default: Any = None) -> Any:
        return self.sections.get(key, default)


def validate_section(key: str, value: Any) -> Any:
    """Validate raw content for one section.

    Raises:
        InvalidSectionContentError: If the value has the wrong shape
    """
    adapter = SECTION_ADAPTERS[key]
    try:
        validated = adapter.validate_python(value)
        if key == "quality_attributes":
            validated = _normalize_quality_attributes(validated)
    except PydanticValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or key}: {err['msg']}" for err in e.errors()
        )
        raise InvalidSectionContentError(key, details, cause=e) from e
    except ValueError as e:
        raise InvalidSectionContentError(key, str(e), cause=e) from e
    return validated


def normalize_content(raw: Mapping[str, Any] | TechSpecContent) -> TechSpecContent:
    """Validate a raw content mapping into TechSpecContent.

    Absent and empty values are dropped; the renderer decides whether a
    dropped section is an error.
    """
    if isinstance(raw, TechSpecContent):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidSectionContentError("<document>", f"expected a mapping, got {type(raw).__name__}")

    content = TechSpecContent()
    if has_content(raw.get("title")):
        try:
            content.title = _to_text(raw["title"]).strip()
        except ValueError as e:
            raise InvalidSectionContentError("title", str(e), cause=e) from e

    for key in raw:
        if key not in DOCUMENT_KEYS and not is_section_key(key):
            content.ignored_keys.append(key)
            logger.warning("unknown_content_key", key=key)

    # Schema order keeps validation errors deterministic
    for spec in iter_sections():
        value = raw.get(spec.key)
        if not has_content(value):
            continue
        validated = validate_section(spec.key, value)
        if has_content(validated):
            content.sections[spec.key] = validated

    return content


def load_content(path: str | Path) -> dict[str, Any]:
    """Read a YAML or JSON answers file into a mapping.

    Raises:
        ContentLoadError: If the file is unreadable, unparseable, or not a mapping
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ContentLoadError(f"Cannot read content file: {path}", cause=e).with_context(path=str(path)) from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ContentLoadError(f"Cannot parse content file: {path}", cause=e).with_context(path=str(path)) from e

    if not isinstance(data, dict):
        raise ContentLoadError(
            f"Content file must contain a mapping of sections: {path}"
        ).with_context(path=str(path))

    logger.debug("content_loaded", path=str(path), keys=len(data))
    return data
