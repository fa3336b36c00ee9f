"""오버레이 값 템플릿 테스트."""

import pytest

from content.template import build_context, first_half, render_template, second_half
from errors import TemplateError


class TestHalves:

    def test_odd_length(self):
        value = "ODDLENGTHSTRING"
        assert first_half(value) == "ODDLENG"
        assert second_half(value) == "THSTRING"
        assert first_half(value) + second_half(value) == value

    def test_empty(self):
        assert first_half("") == ""
        assert second_half("") == ""


class TestRenderTemplate:

    def test_substitution(self):
        assert render_template("Hello {name}", {"name": "Ada"}) == "Hello Ada"

    def test_format_spec(self):
        assert render_template("{lat:.4f}", {"lat": 1.23456789}) == "1.2346"

    def test_half_conversions(self):
        ctx = {"key": "abcdef"}
        assert render_template("{key!1}|{key!2}", ctx) == "abc|def"

    def test_plain_text(self):
        assert render_template("no fields", {}) == "no fields"

    def test_missing_key(self):
        with pytest.raises(TemplateError):
            render_template("{missing}", {})

    @pytest.mark.parametrize("template", ["{unclosed", "{key!z}"])
    def test_bad_syntax(self, template):
        with pytest.raises(TemplateError):
            render_template(template, {"key": "v"})


class TestBuildContext:

    def test_item_overrides_without_mutating_base(self):
        base = {"a": 1, "b": 2}
        merged = build_context(base, {"b": 3, "c": 4})
        assert merged == {"a": 1, "b": 3, "c": 4}
        assert base == {"a": 1, "b": 2}
