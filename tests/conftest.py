import pytest
from jinja2 import DictLoader

from pattern_inspector.engines.jinja import TemplateInspector, create_environment

TEMPLATES = {
    "base.html": "<main>{% block body %}{% endblock %}</main>",
    "card.html": "<div>{% block title %}Default{% endblock %}</div>",
    "button.html": "<button>{{ label }}</button>",
    "page.html": (
        "{% extends 'base.html' %}"
        "{% block body %}"
        "{% include 'button.html' %}"
        "{% embed 'card.html' %}{% block title %}Hello {{ who }}{% endblock %}{% endembed %}"
        "{% endblock %}"
    ),
    "pattern.html": (
        "{% block patterninfo %}name: Card{% endblock %}"
        "{% include 'card.html' %}"
    ),
    "plain.html": "<p>{{ text }}</p>",
    "broken_info.html": "{% block patterninfo %}{{ missing.attr }}{% endblock %}",
    "broken_syntax.html": "{% block patterninfo %}\n{% if %}{% endblock %}",
    "info_base.html": "{% block patterninfo %}name: Base{% endblock %}<main/>",
    "info_child.html": "{% extends 'info_base.html' %}",
    "info_grandchild.html": "{% extends 'info_child.html' %}",
    "info_override.html": (
        "{% extends 'info_base.html' %}"
        "{% block patterninfo %}name: Child, {{ super() }}{% endblock %}"
    ),
    "label_base.html": (
        "{% block patterninfo %}label: {% block label %}base{% endblock %}{% endblock %}"
    ),
    "label_child.html": "{% extends 'label_base.html' %}{% block label %}child{% endblock %}",
    "cycle_a.html": "{% extends 'cycle_b.html' %}",
    "cycle_b.html": "{% extends 'cycle_a.html' %}",
    "orphan.html": "{% extends 'nowhere.html' %}",
}


@pytest.fixture
def env():
    return create_environment(DictLoader(TEMPLATES), autoescape=False)


@pytest.fixture
def inspector(env):
    return TemplateInspector(env)
