"""
Static dependency extraction over a parsed Jinja2 template tree.

Only literal references are collected: ``{% include "card.html" %}`` yields
``card.html``, while ``{% include name %}`` or ``{% include ["a", "b"] %}`` is
resolved at render time and is skipped. The tree is never modified.
"""

from __future__ import annotations

from jinja2 import nodes

# Reference value meaning "no template was supplied". Kept from Twig, which
# fills the target of an embed node with this constant.
NOT_USED = "not_used"

EMBEDDED_TEMPLATES_ATTR = "embedded_templates"


def walk_nodes(node: nodes.Node, kind: type[nodes.Node]) -> list[str]:
    """
    Collect literal targets of every ``kind`` node (e.g. ``nodes.Include``) in
    the tree rooted at *node*.

    Children are visited before the node itself, so references found deeper in
    a subtree come before the reference of the enclosing node.
    """
    references: list[str] = []
    for child in node.iter_child_nodes():
        references.extend(walk_nodes(child, kind))
    if isinstance(node, kind):
        target = getattr(node, "template", None)
        if isinstance(target, nodes.Const) and target.value != NOT_USED:
            references.append(target.value)
    return references


def walk_embeds(node: nodes.Node) -> list[str]:
    """
    Parent templates of the embedded templates attached to *node*.

    Only the ``{% extends %}`` of each embed is reported; includes inside an
    embed body are not searched.
    """
    references: list[str] = []
    embedded = getattr(node, EMBEDDED_TEMPLATES_ATTR, None)
    if embedded:
        for embed in embedded:
            references.extend(get_parents(embed))
    return references


def _parent_node(node: nodes.Node) -> nodes.Expr | None:
    if not isinstance(node, nodes.Template):
        return None
    for child in node.body:
        if isinstance(child, nodes.Extends):
            return child.template
    return None


def get_parents(node: nodes.Node) -> list[str]:
    """Literal ``{% extends %}`` target of a template, as a zero or one item list."""
    parent = _parent_node(node)
    if isinstance(parent, nodes.Const):
        return [parent.value]
    return []
