"""
Template inspection: linked templates and pattern metadata.

``inspect_linked`` parses a template (without rendering it) and lists the
templates it depends on: literal includes anywhere in the tree, the parents of
its embedded templates, then its own parent. ``inspect_pattern_data`` renders
the ``patterninfo`` block only.

Engine failures are re-raised as ``TemplateParsingError``; no partial result is
returned.
"""

import logging
from typing import NoReturn, Protocol

from jinja2 import Environment, Template, TemplateError, nodes
from jinja2.runtime import Context

from pattern_inspector.core.config import settings
from pattern_inspector.core.errors import TemplateParsingError
from pattern_inspector.engines.jinja.environment import get_pattern_env
from pattern_inspector.engines.jinja.source import TemplateSource
from pattern_inspector.engines.jinja.walker import get_parents, walk_embeds, walk_nodes

_log = logging.getLogger(__name__)


class TemplateInspectorInterface(Protocol):
    def inspect_linked(self, source: TemplateSource) -> list[str]: ...

    def inspect_pattern_data(self, source: TemplateSource) -> str | None: ...


class TemplateInspector:
    """Finds template dependencies and pattern metadata with a Jinja2 environment."""

    def __init__(
        self,
        environment: Environment | None = None,
        *,
        info_block: str | None = None,
    ) -> None:
        self.environment = environment if environment is not None else get_pattern_env()
        self.info_block = info_block or settings.PATTERN_INFO_BLOCK

    def inspect_linked(self, source: TemplateSource) -> list[str]:
        """
        Names of the templates *source* includes, embeds or extends.

        Order: includes, parents of embedded templates, own parent. Duplicates
        are kept; computed (non-literal) names are skipped.
        """
        try:
            tree = self.environment.parse(source.code, source.name, source.path)
        except TemplateError as e:
            self._raise_parsing_error(source, e)

        includes = walk_nodes(tree, nodes.Include)
        embeds = walk_embeds(tree)
        parents = get_parents(tree)
        _log.debug(
            "Inspected %s: includes=%s embeds=%s parents=%s",
            source.name,
            includes,
            embeds,
            parents,
        )
        return includes + embeds + parents

    def inspect_pattern_data(self, source: TemplateSource) -> str | None:
        """
        Rendered output of the info block of *source*, or None if neither the
        template nor any template it extends defines it. The template is loaded
        by name through the environment's loader.
        """
        try:
            template = self.environment.get_template(source.name)
            context = template.new_context()
            self._add_parent_blocks(template, context)
            blocks = context.blocks.get(self.info_block)
            if not blocks:
                _log.debug("%s has no %s block", source.name, self.info_block)
                return None
            # The nearest definition wins, as when rendering the whole template
            return "".join(blocks[0](context))
        except TemplateError as e:
            self._raise_parsing_error(source, e)

    def _add_parent_blocks(self, template: Template, context: Context) -> None:
        """
        Register the blocks of every literal ``{% extends %}`` ancestor of
        *template* on *context*, after the blocks already there.
        """
        seen = {template.name}
        current = template
        while True:
            parent_name = self._parent_name(current)
            if parent_name is None or parent_name in seen:
                return
            current = self.environment.get_template(parent_name, current.name)
            seen.add(current.name)
            for name, block in current.blocks.items():
                context.blocks.setdefault(name, []).append(block)

    def _parent_name(self, template: Template) -> str | None:
        if template.name is None:
            return None
        source = TemplateSource.from_environment(self.environment, template.name)
        tree = self.environment.parse(source.code, source.name, source.path)
        parents = get_parents(tree)
        return parents[0] if parents else None

    @staticmethod
    def _raise_parsing_error(source: TemplateSource, e: TemplateError) -> NoReturn:
        """The message prefix names the template engine in use (Jinja)."""
        _log.debug("Inspection of %s failed", source.name, exc_info=True)
        message = "Jinja error thrown during inspection of {}: {}".format(
            source.name, e.message
        )
        raise TemplateParsingError(
            message, source.name, getattr(e, "lineno", None)
        ) from e
