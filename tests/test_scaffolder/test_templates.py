"""Tests for the Jinja2 TemplateRenderer.

Covers:
- Rendering packaged and local templates
- StrictUndefined: missing parameters fail instead of leaking placeholders
- render_to_file / render_tree output layout
- list_templates
- slugify
"""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import UndefinedError

from creatif_cli.scaffolder.templates import TemplateRenderer, slugify


pytestmark = pytest.mark.unit


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def local_renderer(tmp_path: Path) -> TemplateRenderer:
    """Renderer over a small throwaway template tree."""
    root = tmp_path / "tpl"
    (root / "tree" / "nested").mkdir(parents=True)
    (root / "tree" / "a.txt.j2").write_text("A {{ name }}\n", encoding="utf-8")
    (root / "tree" / "nested" / "b.txt.j2").write_text("B {{ name }}\n", encoding="utf-8")
    (root / "single").mkdir()
    (root / "single" / "slug.j2").write_text("{{ title | slugify }}", encoding="utf-8")
    (root / "single" / "jsx.j2").write_text(
        "{% raw %}<div style={{ color: 'red' }} />{% endraw %}", encoding="utf-8"
    )
    return TemplateRenderer(root)


class TestRender:
    def test_render_local(self, local_renderer):
        assert local_renderer.render("tree/a.txt.j2", {"name": "Creatif"}) == "A Creatif\n"

    def test_missing_variable_raises(self, local_renderer):
        with pytest.raises(UndefinedError):
            local_renderer.render("tree/a.txt.j2", {})

    def test_slugify_filter_registered(self, local_renderer):
        assert local_renderer.render("single/slug.j2", {"title": "My App"}) == "my-app"

    def test_raw_blocks_keep_jsx_braces(self, local_renderer):
        out = local_renderer.render("single/jsx.j2", {})
        assert "style={{ color: 'red' }}" in out

    def test_packaged_app_template(self, renderer):
        out = renderer.render("project/src/App.tsx.j2", {"project_name": "Acme"})
        assert 'projectName: "Acme"' in out
        assert "CreatifProvider" in out

    def test_packaged_env_requires_secret(self, renderer):
        with pytest.raises(UndefinedError):
            renderer.render("backend/env.j2", {"project_name": "Acme"})

    def test_keeps_trailing_newline(self, renderer):
        out = renderer.render("project/src/index.tsx.j2", {})
        assert out.endswith("\n")


class TestRenderToFile:
    async def test_creates_parent_directories(self, local_renderer, tmp_path):
        out = tmp_path / "out" / "deep" / "a.txt"
        path = await local_renderer.render_to_file("tree/a.txt.j2", out, {"name": "x"})
        assert path == out
        assert out.read_text(encoding="utf-8") == "A x\n"


class TestRenderTree:
    async def test_preserves_structure_and_strips_suffix(self, local_renderer, tmp_path):
        out = tmp_path / "out"
        written = await local_renderer.render_tree("tree", out, {"name": "y"})
        assert written == [out / "a.txt", out / "nested" / "b.txt"]
        assert (out / "nested" / "b.txt").read_text(encoding="utf-8") == "B y\n"

    async def test_only_renders_prefix(self, local_renderer, tmp_path):
        out = tmp_path / "out"
        await local_renderer.render_tree("tree", out, {"name": "y"})
        assert not (out / "slug").exists()
        assert not (out / "single").exists()

    async def test_missing_prefix_returns_empty(self, local_renderer, tmp_path):
        assert await local_renderer.render_tree("nope", tmp_path, {}) == []


class TestListTemplates:
    def test_lists_relative_posix_paths(self, local_renderer):
        assert local_renderer.list_templates("tree") == [
            "tree/a.txt.j2",
            "tree/nested/b.txt.j2",
        ]

    def test_packaged_catalog(self, renderer):
        names = renderer.list_templates()
        assert "project/package.json.j2" in names
        assert "backend/Dockerfile.j2" in names
        assert "starter/src/css/root.module.css.j2" in names

    def test_unknown_prefix(self, renderer):
        assert renderer.list_templates("missing") == []


class TestSlugify:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("My App", "my-app"),
            ("  Real Estate -- Manager ", "real-estate-manager"),
            ("already-slugged", "already-slugged"),
            ("!!!", ""),
        ],
    )
    def test_slugify(self, value, expected):
        assert slugify(value) == expected
