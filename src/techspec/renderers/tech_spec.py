"""
Tech Spec renderer.

Turns a section content mapping into the final Tech Spec document, in
Markdown or in wiki markup.
"""

import datetime
from typing import Any, Mapping

from techspec.content import Metadata, QualityAttribute, TechSpecContent, normalize_content
from techspec.converter import MarkupConverter
from techspec.errors import InvalidConfigError, MissingRequiredSectionError, TechSpecError
from techspec.logging import get_logger
from techspec.renderers.base import BaseRenderer
from techspec.schema import QUALITY_ATTRIBUTES, SectionSpec, iter_sections

logger = get_logger(__name__)

OUTPUT_FORMATS = ("markdown", "wiki")


class TechSpecRenderer(BaseRenderer):
    """Render a Tech Spec document from section content.

    Manifesto:
        The section schema is the only ordering authority. The renderer
        walks it once: mandatory sections must have content, optional
        sections appear only when supplied, and nothing is reordered.

    Architecture:
        ```
        mapping ──► normalize_content() ──► TechSpecContent
                                                  │
                         missing mandatory? ──► MissingRequiredSectionError
                                                  │
                      for spec in TECH_SPEC_SCHEMA:
                          sections/<key>.md.j2 ──► block
                                                  │
                         "\\n\\n".join(blocks) + "\\n"
                                                  │
                         fmt == "wiki" ──► MarkupConverter
        ```

    Features:
        - Validate every section before rendering anything
        - Fill metadata defaults (date, owner, version, status) from config
        - Skip absent optional and conditional sections entirely
        - Always emit all quality attribute rows in fixed order
        - Optional wiki markup output

    Examples:
        >>> renderer = TechSpecRenderer()
        >>> doc = renderer.render(content)
        >>> doc.index("## Problem Statement") < doc.index("## Risk")
        True

    Guardrails:
        - Do NOT emit a heading for a section with no content
          ✅ Skip optional sections; raise for mandatory ones
        - Do NOT return partial output on validation failure
          ✅ Collect all missing keys before rendering

    Tags:
        - renderer
        - tech_spec
        - sections
    """

    section_template = "sections/{key}.md.j2"

    def render(self, content: Mapping[str, Any] | TechSpecContent, fmt: str = "markdown") -> str:
        """Render the document.

        Args:
            content: Section key -> content mapping (or validated content)
            fmt: "markdown" or "wiki"

        Returns:
            The rendered document

        Raises:
            MissingRequiredSectionError: If a mandatory section has no content
            InvalidSectionContentError: If a section's content is malformed
        """
        if fmt not in OUTPUT_FORMATS:
            raise InvalidConfigError("format", fmt, f"Unknown output format {fmt!r}; expected one of {', '.join(OUTPUT_FORMATS)}")

        spec_content = normalize_content(content)

        missing = [
            spec.key
            for spec in iter_sections()
            if spec.mandatory and spec.default is None and spec.key not in spec_content
        ]
        if missing:
            raise MissingRequiredSectionError(missing)

        blocks = []
        for spec in iter_sections():
            if spec.key in spec_content:
                value = spec_content.get(spec.key)
            elif spec.mandatory:
                value = spec.default()
            else:
                continue

            block = self.render_section(spec, value, spec_content)
            blocks.append(block)
            logger.debug("section_rendered", section=spec.key, size=len(block))

        document = "\n\n".join(blocks) + "\n"

        if fmt == "wiki":
            document = MarkupConverter.from_config(self.config).convert(document)

        logger.info("tech_spec_rendered", sections=len(blocks), format=fmt, size=len(document))
        return document

    def render_section(self, spec: SectionSpec, value: Any, content: TechSpecContent | None = None) -> str:
        """Render one section block through its template."""
        context = {"spec": spec, "content": value}

        if spec.key == "metadata":
            metadata = self._with_defaults(value)
            context["content"] = metadata
            context["title"] = (
                (content.title if content else None) or metadata.title or self.config.title
            )
        elif spec.key == "quality_attributes":
            context["rows"] = [
                (name, value.get(name) or QualityAttribute()) for name in QUALITY_ATTRIBUTES
            ]

        try:
            text = self._render_template(self.section_template.format(key=spec.key), **context)
        except TechSpecError as e:
            e.with_context(section=spec.key)
            raise

        return text.strip("\n")

    def sections_in(self, content: Mapping[str, Any] | TechSpecContent) -> list[str]:
        """Keys of the sections a render of ``content`` would emit, in order."""
        spec_content = normalize_content(content)
        return [
            spec.key
            for spec in iter_sections()
            if spec.key in spec_content or spec.mandatory
        ]

    def _with_defaults(self, value: Any) -> Metadata:
        metadata = value if isinstance(value, Metadata) else Metadata.model_validate(value or {})
        return metadata.model_copy(update={
            "date": metadata.date or datetime.date.today().isoformat(),
            "owner": metadata.owner or self.config.default_owner,
            "version": metadata.version or self.config.default_version,
            "status": metadata.status or self.config.default_status,
        })
