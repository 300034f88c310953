"""
Jinja2 environment for pattern templates.

``PatternEnvironment`` always loads the ``{% embed %}`` tag. Parsed templates
carry their embedded templates in the ``embedded_templates`` attribute of the
root node; compiled templates register them so the generated includes render.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    Template,
    TemplateNotFound,
    nodes,
)
from jinja2.parser import Parser

from pattern_inspector.core.config import settings
from pattern_inspector.engines.jinja.extensions import (
    EMBED_KEY_ATTR,
    EMBED_PREFIX,
    PATTERN_EXTENSIONS,
)
from pattern_inspector.engines.jinja.walker import EMBEDDED_TEMPLATES_ATTR

_log = logging.getLogger(__name__)

_PATTERN_ENV: "PatternEnvironment | None" = None
_env_lock = threading.Lock()
_COMPILED_EMBEDS_MAX_SIZE = 512


class PatternEnvironment(Environment):
    """Jinja2 ``Environment`` with Twig-style embeds."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        extensions = list(kwargs.pop("extensions", None) or ())
        for ext in PATTERN_EXTENSIONS:
            if ext not in extensions:
                extensions.append(ext)
        super().__init__(*args, extensions=extensions, **kwargs)
        self._embedded: dict[str, nodes.Template] = {}
        self._embedded_compiled: OrderedDict[str, Template] = OrderedDict()
        self._embeds_by_host: dict[str, set[str]] = {}
        self._embed_lock = threading.Lock()

    def _parse(
        self, source: str, name: str | None, filename: str | None
    ) -> nodes.Template:
        parser = Parser(self, source, name, filename)
        tree = parser.parse()
        setattr(
            tree,
            EMBEDDED_TEMPLATES_ATTR,
            list(getattr(parser, EMBEDDED_TEMPLATES_ATTR, ())),
        )
        return tree

    def compile(  # type: ignore[override]
        self,
        source: str | nodes.Template,
        name: str | None = None,
        filename: str | None = None,
        raw: bool = False,
        defer_init: bool = False,
    ) -> Any:
        if isinstance(source, str):
            source = self.parse(source, name, filename)
        self._register_embeds(source, name)
        return super().compile(source, name, filename, raw, defer_init)

    def _register_embeds(self, tree: nodes.Template, host: str | None) -> None:
        embedded = getattr(tree, EMBEDDED_TEMPLATES_ATTR, None) or []
        keys = {getattr(embed, EMBED_KEY_ATTR) for embed in embedded}
        with self._embed_lock:
            if host is not None:
                # Embeds dropped by an edited template are not reachable anymore
                for stale in self._embeds_by_host.pop(host, set()) - keys:
                    self._embedded.pop(stale, None)
                    self._embedded_compiled.pop(stale, None)
                if keys:
                    self._embeds_by_host[host] = keys
            for embed in embedded:
                self._embedded.setdefault(getattr(embed, EMBED_KEY_ATTR), embed)

    def get_template(  # type: ignore[override]
        self,
        name: str | Template,
        parent: str | None = None,
        globals: dict[str, Any] | None = None,
    ) -> Template:
        if isinstance(name, str) and name.startswith(EMBED_PREFIX):
            return self._load_embedded(name, globals)
        return super().get_template(name, parent, globals)

    def _load_embedded(self, key: str, globals: dict[str, Any] | None) -> Template:
        with self._embed_lock:
            template = self._embedded_compiled.get(key)
            if template is not None:
                self._embedded_compiled.move_to_end(key)
            tree = self._embedded.get(key)
        if template is not None:
            if globals:
                template.globals.update(globals)
            return template
        if tree is None:
            raise TemplateNotFound(key)

        template = self.template_class.from_code(
            self, self.compile(tree, key), self.make_globals(globals), None
        )
        with self._embed_lock:
            self._embedded_compiled[key] = template
            if len(self._embedded_compiled) > _COMPILED_EMBEDS_MAX_SIZE:
                self._embedded_compiled.popitem(last=False)
        return template


def create_environment(
    loader: BaseLoader | None = None, **options: Any
) -> PatternEnvironment:
    """Build a ``PatternEnvironment`` from settings; *options* override them."""
    if loader is None and settings.TEMPLATE_DIRS:
        loader = FileSystemLoader(
            settings.TEMPLATE_DIRS,
            encoding=settings.TEMPLATE_ENCODING,
            followlinks=settings.TEMPLATE_FOLLOW_LINKS,
        )
    options.setdefault("autoescape", settings.TEMPLATE_AUTOESCAPE)
    options.setdefault("extensions", list(settings.TEMPLATE_EXTENSIONS))
    return PatternEnvironment(loader=loader, **options)


def get_pattern_env() -> PatternEnvironment:
    """Return the shared pattern environment, created on first use."""
    global _PATTERN_ENV
    if _PATTERN_ENV is None:
        with _env_lock:
            if _PATTERN_ENV is None:
                _PATTERN_ENV = create_environment()
                _log.debug(
                    "Created pattern environment (template dirs: %s)",
                    settings.TEMPLATE_DIRS or "none",
                )
    return _PATTERN_ENV
