"""
Configuration for techspec.

Manages document defaults, template lookup, and markup conversion settings.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from techspec.converter.rules import DEFAULT_CODE_LANGUAGES
from techspec.errors import ConfigError, InvalidConfigError


@dataclass
class TechSpecConfig:
    """Configuration for rendering and converting tech specs.

    Attributes:
        title: Document title used when the content has none
        default_owner: Owner written to the metadata table when not supplied
        default_version: Version written to the metadata table when not supplied
        default_status: Status written to the metadata table when not supplied
        template_dir: Directory whose templates override the packaged ones
        list_indent: Spaces per nesting level when converting Markdown lists
        strict_markup: Raise on unrecognized markup instead of passing it through
        code_languages: Fence languages the wiki dialect understands
    """

    title: str = "Tech Spec"
    default_owner: str = "TBD"
    default_version: str = "0.1"
    default_status: str = "Draft"
    template_dir: Path | None = None

    # Markup conversion
    list_indent: int = 2
    strict_markup: bool = False
    code_languages: list[str] = field(default_factory=lambda: list(DEFAULT_CODE_LANGUAGES))

    def __post_init__(self):
        """Convert paths and validate values."""
        if isinstance(self.template_dir, str):
            self.template_dir = Path(self.template_dir)

        if not isinstance(self.list_indent, int) or self.list_indent < 1:
            raise InvalidConfigError("list_indent", self.list_indent, "list_indent must be a positive integer")

        if not self.title:
            raise InvalidConfigError("title", self.title, "title must not be empty")

        self.code_languages = [lang.lower() for lang in self.code_languages]

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "TechSpecConfig":
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            TechSpecConfig instance
        """
        try:
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot load configuration from {yaml_path}", cause=e) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration in {yaml_path} must be a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TechSpecConfig":
        """Create config from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            TechSpecConfig instance
        """
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                raise InvalidConfigError(key, data[key], f"Unknown configuration key: {key}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "title": self.title,
            "default_owner": self.default_owner,
            "default_version": self.default_version,
            "default_status": self.default_status,
            "template_dir": str(self.template_dir) if self.template_dir else None,
            "list_indent": self.list_indent,
            "strict_markup": self.strict_markup,
            "code_languages": list(self.code_languages),
        }


# Default configuration
DEFAULT_CONFIG = TechSpecConfig()
