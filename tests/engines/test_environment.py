"""Unit tests for engines.jinja.environment."""

import pytest
from jinja2 import DictLoader, FileSystemLoader, TemplateNotFound

from pattern_inspector.core.config import settings
from pattern_inspector.engines.jinja import environment
from pattern_inspector.engines.jinja.environment import (
    PatternEnvironment,
    create_environment,
    get_pattern_env,
)
from pattern_inspector.engines.jinja.extensions import EMBED_PREFIX, EmbedExtension


class TestPatternEnvironment:
    def test_embed_extension_always_loaded(self):
        e = PatternEnvironment(extensions=["jinja2.ext.do"])
        assert any(isinstance(x, EmbedExtension) for x in e.extensions.values())
        assert "jinja2.ext.ExprStmtExtension" in e.extensions

    def test_unknown_embed_key(self):
        e = PatternEnvironment()
        with pytest.raises(TemplateNotFound):
            e.get_template(EMBED_PREFIX + "nope#1")

    def test_embed_compiled_once(self, env):
        tree = env.parse("{% embed 'card.html' %}{% endembed %}", "host.html")
        env.compile(tree, "host.html")
        key = tree.embedded_templates[0].embed_key
        assert env.get_template(key) is env.get_template(key)

    def test_regular_templates_still_load(self, env):
        assert env.get_template("plain.html").render(text="x") == "<p>x</p>"


class TestCreateEnvironment:
    def test_explicit_loader(self):
        loader = DictLoader({"a.html": "a"})
        e = create_environment(loader)
        assert e.loader is loader
        assert e.autoescape is settings.TEMPLATE_AUTOESCAPE

    def test_template_dirs(self, tmp_path, monkeypatch):
        (tmp_path / "a.html").write_text("from disk")
        monkeypatch.setattr(settings, "TEMPLATE_DIRS", [str(tmp_path)])
        e = create_environment()
        assert isinstance(e.loader, FileSystemLoader)
        assert e.get_template("a.html").render() == "from disk"

    def test_no_dirs_no_loader(self, monkeypatch):
        monkeypatch.setattr(settings, "TEMPLATE_DIRS", [])
        assert create_environment().loader is None

    def test_options_override_settings(self):
        e = create_environment(autoescape=False)
        assert e.autoescape is False


class TestGetPatternEnv:
    def test_singleton(self, monkeypatch):
        monkeypatch.setattr(environment, "_PATTERN_ENV", None)
        first = get_pattern_env()
        assert isinstance(first, PatternEnvironment)
        assert get_pattern_env() is first


class TestEmbedRegistry:
    def test_repeated_from_string_reuses_embed(self, env):
        for _ in range(50):
            t = env.from_string("{% embed 'card.html' %}{% endembed %}")
            assert t.render() == "<div>Default</div>"
        assert len(env._embedded) == 1
        assert len(env._embedded_compiled) == 1

    def test_same_source_same_key(self, env):
        src = "{% embed 'card.html' %}{% block title %}x{% endblock %}{% endembed %}"
        first = env.parse(src, "host.html").embedded_templates[0].embed_key
        second = env.parse(src, "host.html").embedded_templates[0].embed_key
        assert first == second

    def test_recompile_replaces_embeds(self, env):
        env.compile("{% embed 'card.html' %}{% endembed %}", "host.html")
        env.compile("{% embed 'base.html' %}{% endembed %}", "host.html")
        assert len(env._embedded) == 1
        (key,) = env._embedded
        assert env.get_template(key).render() == "<main></main>"

    def test_other_hosts_kept(self, env):
        env.compile("{% embed 'card.html' %}{% endembed %}", "one.html")
        env.compile("{% embed 'card.html' %}{% endembed %}", "two.html")
        env.compile("<p>no embeds</p>", "one.html")
        assert len(env._embedded) == 1
        (key,) = env._embedded
        assert "two.html" in key
