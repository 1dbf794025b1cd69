"""
Section guide renderer.

Renders the authoring guide: section order, what good content looks like,
the questions to ask, and the wiki markup conversion table.
"""

from typing import Any

from techspec.converter import MarkupConverter, conversion_table
from techspec.guide import guide_for
from techspec.renderers.base import BaseRenderer
from techspec.schema import get_section, iter_sections


def code_cell_filter(value: str) -> str:
    """Show example markup literally inside a table cell."""
    lines = [line.replace("|", "\\|").replace("`", "\\`") for line in value.split("\n")]
    return "<br>".join(f"`{line}`" if line else "" for line in lines)


class GuideRenderer(BaseRenderer):
    """Render the section guide as Markdown.

    Features:
        - One entry per schema section, in document order
        - Rules and numbered questions per section
        - Optional conversion table for wiki markup

    Tags:
        - renderer
        - guide
    """

    template_name = "guide.md.j2"

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.env.filters['code_cell'] = code_cell_filter

    def render(self, keys: list[str] | None = None, include_conversion: bool = True) -> str:
        """Generate the guide.

        Args:
            keys: Sections to include (all when None)
            include_conversion: Append the markup conversion table

        Returns:
            Rendered guide document
        """
        specs = [get_section(key) for key in keys] if keys else list(iter_sections())
        entries = [{"spec": spec, "guide": guide_for(spec.key)} for spec in specs]

        conversion = None
        if include_conversion:
            conversion = conversion_table(MarkupConverter.from_config(self.config))

        content = self._render_template(
            self.template_name,
            entries=entries,
            conversion=conversion,
        )
        return content.strip("\n") + "\n"
