"""
Errors raised while inspecting templates.

Engine failures (syntax errors, missing templates, render errors) surface as a
single ``TemplateParsingError`` chained to the original Jinja2 exception.
"""

from __future__ import annotations


class TemplateParsingError(Exception):
    """Raised when the template engine fails to tokenize, parse, load or render a template."""

    def __init__(
        self, message: str, template_name: str, code: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.template_name = template_name
        self.code = code
