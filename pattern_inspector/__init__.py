from pattern_inspector.core.errors import TemplateParsingError
from pattern_inspector.engines.jinja import (
    TemplateInspector,
    TemplateInspectorInterface,
    TemplateSource,
)

__all__ = [
    "TemplateInspector",
    "TemplateInspectorInterface",
    "TemplateParsingError",
    "TemplateSource",
]
