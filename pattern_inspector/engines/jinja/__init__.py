"""
Jinja2 template inspection.

Exports: TemplateInspector, TemplateSource, PatternEnvironment, get_pattern_env.
"""

from pattern_inspector.engines.jinja.environment import (
    PatternEnvironment,
    create_environment,
    get_pattern_env,
)
from pattern_inspector.engines.jinja.inspector import (
    TemplateInspector,
    TemplateInspectorInterface,
)
from pattern_inspector.engines.jinja.source import TemplateSource

__all__ = [
    "PatternEnvironment",
    "TemplateInspector",
    "TemplateInspectorInterface",
    "TemplateSource",
    "create_environment",
    "get_pattern_env",
]
