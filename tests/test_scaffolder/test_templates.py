"""Tests for the template renderer and manifest record."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from zorx.scaffolder.templates import (
    TEMPLATE_FILES,
    TemplateRenderer,
    controller_file_content,
    entry_file_content,
    manifest_content,
    route_file_content,
)

pytestmark = pytest.mark.unit


class TestEntryFile:
    def test_binds_env_port_with_fallback(self):
        content = entry_file_content(8080)
        assert "const PORT = process.env.PORT || 8080;" in content

    def test_only_requested_port_literal(self):
        content = entry_file_content(8080)
        assert re.findall(r"\b\d{2,5}\b", content) == ["8080"]

    def test_default_port_literal(self):
        assert "process.env.PORT || 3000" in entry_file_content(3000)

    def test_wires_middleware_and_router(self):
        content = entry_file_content(3000)
        assert "app.use(cors());" in content
        assert "app.use(helmet());" in content
        assert "app.use(express.json());" in content
        assert "app.use(express.urlencoded({ extended: false }));" in content
        assert "app.use('/', mainRoute);" in content
        assert "require('./src/routes/main.route')" in content

    def test_port_passed_through_uninterpreted(self):
        assert "process.env.PORT || abc" in entry_file_content("abc")


class TestRouteAndController:
    def test_route_exposes_root_get(self):
        content = route_file_content()
        assert "router.get('/', mainEndpoint);" in content
        assert "require('../controllers/main.controller')" in content
        assert "module.exports = router;" in content

    def test_controller_success_and_error_payloads(self):
        content = controller_file_content()
        assert "res.status(200).json({ res: 'Your API is up and running 🚀' })" in content
        assert "res.status(500).json({ res: 'Server Error' })" in content
        assert "mainEndpoint" in content


class TestManifest:
    def test_fields(self):
        manifest = manifest_content("shop-api")
        assert manifest["name"] == "shop-api"
        assert manifest["version"] == "1.0.0"
        assert manifest["main"] == "app.js"
        assert manifest["scripts"] == {"start": "node app.js", "dev": "node --watch app.js"}
        assert manifest["keywords"] == []
        assert manifest["author"] == ""
        assert manifest["license"] == "ISC"
        assert manifest["type"] == "commonjs"

    def test_returns_fresh_record(self):
        first = manifest_content("a")
        first["keywords"].append("mutated")
        assert manifest_content("a")["keywords"] == []


class TestTemplateRenderer:
    def test_template_set_is_fixed(self):
        assert [t.relative_path for t in TEMPLATE_FILES] == [
            "app.js",
            "src/routes/main.route.js",
            "src/controllers/main.controller.js",
        ]

    def test_every_template_exists(self):
        renderer = TemplateRenderer()
        for template in TEMPLATE_FILES:
            assert (renderer.template_dir / template.template_name).is_file()

    def test_missing_variable_is_an_error(self):
        from jinja2 import UndefinedError

        with pytest.raises(UndefinedError):
            TemplateRenderer().render("app.js.j2", {})

    @pytest.mark.asyncio
    async def test_render_to_file_overwrites(self, tmp_path: Path):
        target = tmp_path / "src" / "routes" / "main.route.js"
        target.parent.mkdir(parents=True)
        target.write_text("stale", encoding="utf-8")

        written = await TemplateRenderer().render_to_file(TEMPLATE_FILES[1], tmp_path, {})

        assert written == target
        assert target.read_text(encoding="utf-8") == route_file_content()

    def test_custom_template_dir(self, tmp_path: Path):
        (tmp_path / "hello.j2").write_text("port={{ port }}", encoding="utf-8")
        assert TemplateRenderer(tmp_path).render("hello.j2", {"port": 1}) == "port=1"
