"""
Tech Spec builder.

Coordinates the generation process: loading the answers file, rendering
the document, converting it, and writing the output file.

Example:
    >>> builder = TechSpecBuilder()
    >>> result = builder.build(Path("payments.yaml"), Path("docs/payments.md"))
    >>> result.sections[:3]
    ['metadata', 'problem_statement', 'goal']
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from techspec.config import TechSpecConfig
from techspec.content import load_content, normalize_content
from techspec.converter import MarkupConverter
from techspec.errors import ContentLoadError, StorageError, TechSpecError
from techspec.logging import LogContext, get_logger
from techspec.renderers import TechSpecRenderer

logger = get_logger(__name__)

@dataclass
class BuildResult:
    """Result of one build or conversion.

    Attributes:
        content: The produced document text
        fmt: Output format
        output_path: Where the document was written (None if not written)
        sections: Section keys rendered, in document order
        unknown_lines: Line numbers passed through unconverted
    """

    content: str
    fmt: str
    output_path: Path | None = None
    sections: list[str] = field(default_factory=list)
    unknown_lines: list[int] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.content.encode("utf-8"))


class TechSpecBuilder:
    """Build Tech Spec documents from answers files.

    Manifesto:
        One call goes from answers file to finished document. The builder
        owns file IO; renderers and the converter stay pure string
        transforms.

    Architecture:
        ```
        TechSpecBuilder
              │
              ├──► load_content(path) ──► mapping
              │
              ├──► TechSpecRenderer.render(mapping, fmt)
              │
              └──► write output_path (UTF-8, parents created)
        ```

    Guardrails:
        - Do NOT write a file when rendering fails
          ✅ Render fully in memory, then write

    Tags:
        - builder
        - generation
        - io
    """

    def __init__(self, config: TechSpecConfig | None = None):
        self.config = config or TechSpecConfig()
        self.renderer = TechSpecRenderer(self.config)

    def render(self, content: dict[str, Any], fmt: str = "markdown") -> BuildResult:
        """Render content that is already in memory."""
        spec_content = normalize_content(content)
        document = self.renderer.render(spec_content, fmt=fmt)
        return BuildResult(
            content=document,
            fmt=fmt,
            sections=self.renderer.sections_in(spec_content),
        )

    def build(
        self,
        content_path: Path,
        output_path: Path | None = None,
        fmt: str = "markdown",
    ) -> BuildResult:
        """Render an answers file and optionally write the result.

        Args:
            content_path: YAML or JSON answers file
            output_path: Where to write (not written when None)
            fmt: "markdown" or "wiki"

        Returns:
            BuildResult describing the produced document
        """
        content_path = Path(content_path)
        with LogContext(content_file=str(content_path)):
            logger.info("build_started", format=fmt)
            try:
                result = self.render(load_content(content_path), fmt=fmt)
            except TechSpecError as e:
                logger.error("build_failed", **e.to_dict())
                raise

            if output_path is not None:
                result.output_path = self._write(Path(output_path), result.content)

            logger.info("build_finished", size=result.size, sections=len(result.sections))
        return result

    def convert_file(
        self,
        input_path: Path,
        output_path: Path | None = None,
        strict: bool | None = None,
    ) -> BuildResult:
        """Convert a Markdown file to wiki markup.

        Args:
            input_path: Markdown file
            output_path: Where to write (not written when None)
            strict: Override config.strict_markup

        Returns:
            BuildResult with the converted text
        """
        input_path = Path(input_path)
        try:
            text = input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ContentLoadError(f"Cannot read {input_path}", cause=e).with_context(path=str(input_path)) from e

        converter = MarkupConverter.from_config(self.config, strict=strict)
        with LogContext(input_file=str(input_path)):
            converted = converter.convert(text)
            result = BuildResult(
                content=converted,
                fmt="wiki",
                unknown_lines=[e.line_number for e in converter.unknown_lines],
            )
            if output_path is not None:
                result.output_path = self._write(Path(output_path), converted)
            logger.info("conversion_finished", size=result.size, unknown_lines=len(result.unknown_lines))
        return result

    def _write(self, output_path: Path, content: str) -> Path:
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write {output_path}", cause=e).with_context(path=str(output_path)) from e
        logger.info("document_written", path=str(output_path), size=len(content.encode("utf-8")))
        return output_path
