"""
Base renderer for document generation.

Provides the Jinja2 environment, the shared filters, and template loading
with per-project overrides.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, TemplateError, select_autoescape

from techspec.config import TechSpecConfig
from techspec.errors import TemplateRenderError
from techspec.schema import has_content


def cell_filter(value: Any) -> str:
    """Jinja2 filter making a value safe inside a Markdown table cell.

    Pipes are escaped, newlines become ``<br>``, and empty values render
    as ``-``.
    """
    if value is None:
        return "-"
    text = str(value).strip()
    if not text:
        return "-"
    text = text.replace("|", "\\|")
    return "<br>".join(line.strip() for line in text.splitlines())


def json_block_filter(value: Any) -> str:
    """Jinja2 filter rendering a request/response body for a json fence."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, ensure_ascii=False)
    return str(value).strip("\n")


class BaseRenderer(ABC):
    """Base class for document renderers.

    Manifesto:
        Renderers assemble one kind of document. Templates handle
        formatting; renderers handle ordering, defaults, and validation.

    Architecture:
        ```
        content ──► Renderer.render()
                         │
                         ▼
                 Jinja2 Template (override dir, then package)
                         │
                         ▼
                 Rendered Markdown
        ```

    Features:
        - Load templates from ``config.template_dir`` before packaged ones
        - Shared ``cell`` and ``json_block`` filters, ``present`` test
        - Wrap Jinja2 failures in TemplateRenderError

    Tags:
        - renderer
        - template
        - jinja2
    """

    def __init__(self, config: TechSpecConfig | None = None):
        """Initialize the renderer.

        Args:
            config: Configuration (defaults when not given)
        """
        self.config = config or TechSpecConfig()

        loaders = []
        if self.config.template_dir is not None:
            loaders.append(FileSystemLoader(str(Path(self.config.template_dir))))
        loaders.append(PackageLoader("techspec", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(['html', 'xml']),
            trim_blocks=True,
            lstrip_blocks=True,
        )

        self.env.filters['cell'] = cell_filter
        self.env.filters['json_block'] = json_block_filter
        self.env.tests['present'] = has_content

    @abstractmethod
    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render the document."""

    def _render_template(self, template_name: str, **context: Any) -> str:
        """Load and render one template.

        Raises:
            TemplateRenderError: If the template is missing or fails to render
        """
        try:
            template = self.env.get_template(template_name)
            return template.render(config=self.config, **context)
        except TemplateError as e:
            raise TemplateRenderError(
                f"Template {template_name} failed: {e}", cause=e
            ).with_context(template=template_name) from e
