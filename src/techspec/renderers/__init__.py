"""
Renderers module for document generation.

Provides renderers that turn section content into documents using
Jinja2 templates.
"""

from techspec.renderers.base import BaseRenderer
from techspec.renderers.guide import GuideRenderer
from techspec.renderers.tech_spec import OUTPUT_FORMATS, TechSpecRenderer

__all__ = [
    "BaseRenderer",
    "GuideRenderer",
    "TechSpecRenderer",
    "OUTPUT_FORMATS",
]
