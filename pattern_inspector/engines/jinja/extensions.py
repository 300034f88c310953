"""
Custom Jinja2 tags for pattern templates.

{% embed %}: Twig-style embedding. Includes a template while overriding some
of its blocks in place, without a separate child template file.
"""

import hashlib

from jinja2 import nodes
from jinja2.ext import Extension
from jinja2.parser import Parser

from pattern_inspector.engines.jinja.walker import EMBEDDED_TEMPLATES_ATTR

# Names of embedded templates start with this prefix; PatternEnvironment
# serves them from its registry instead of the loader.
EMBED_PREFIX = "__embed__:"
EMBED_KEY_ATTR = "embed_key"


def _embed_key(host: str | None, embedded: nodes.Template) -> str:
    # Same host and same embed body give the same key, so recompiling a
    # template replaces its embeds instead of adding new ones.
    digest = hashlib.md5(embedded.dump().encode(), usedforsecurity=False).hexdigest()
    return f"{EMBED_PREFIX}{host or '<string>'}#{digest}"


class EmbedExtension(Extension):
    """
    {% embed "card.html" %}
      {% block title %}Hello{% endblock %}
    {% endembed %}

    The body becomes an embedded template extending the given parent. It is
    recorded on the parser (see ``PatternEnvironment``) and replaced in the host
    template by an include of the embedded template. The include target is a
    call, not a constant, so static inspection never reports it as an include.
    """

    tags = {"embed"}

    def parse(self, parser: Parser) -> nodes.Include:
        token = next(parser.stream)
        lineno = token.lineno
        parent = parser.parse_expression()
        body = parser.parse_statements(("name:endembed",), drop_needle=True)

        embedded = nodes.Template(
            [nodes.Extends(parent, lineno=lineno), *body], lineno=lineno
        )
        key = _embed_key(parser.name, embedded)
        embedded.set_environment(self.environment)
        setattr(embedded, EMBED_KEY_ATTR, key)
        self._record(parser, embedded)

        return nodes.Include(
            self.call_method("_embed_target", [nodes.Const(key)]),
            True,
            False,
            lineno=lineno,
        )

    @staticmethod
    def _record(parser: Parser, embedded: nodes.Template) -> None:
        # Nested embeds are parsed first and land earlier in the same list.
        recorded = getattr(parser, EMBEDDED_TEMPLATES_ATTR, None)
        if recorded is None:
            recorded = []
            setattr(parser, EMBEDDED_TEMPLATES_ATTR, recorded)
        recorded.append(embedded)

    def _embed_target(self, key: str) -> str:
        return key


# Extensions every pattern environment loads
PATTERN_EXTENSIONS: list[type[Extension]] = [EmbedExtension]
