"""
Engines: Jinja2 template inspection.
"""

from pattern_inspector.engines.jinja import TemplateInspector, TemplateSource

__all__ = [
    "TemplateInspector",
    "TemplateSource",
]
