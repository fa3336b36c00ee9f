"""설정 파일 로딩/검증 테스트."""

import json
from pathlib import Path

import pytest

from config import (
    OverlayOptions,
    _deep_merge,
    load_config,
    parse_overlay,
    parse_run_config,
    read_run_config,
)
from errors import ConfigError

SAMPLE_YAML = """
fontpath: fonts/Roboto.ttf
colorspace: cmyk
format: jpeg
context:
  issuer: ACME
items:
  - name: Ada
  - name: Grace
outputs:
  - prefix: front
    background: bg/front.png
    overlays:
      - type: text
        xoffset: 10
        yoffset: 20
        template: "{name}"
        foreground: "#ff1034"
      - type: qr
        size: 200
        rotation: 45
        template: "{issuer}/{name}"
"""


class TestDeepMerge:

    def test_nested(self):
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        assert _deep_merge(base, {"a": {"y": 3}}) == {"a": {"x": 1, "y": 3}, "b": 1}
        assert base["a"]["y"] == 2


class TestLoadConfig:

    def test_yaml(self, tmp_path):
        path = tmp_path / "job.yaml"
        path.write_text(SAMPLE_YAML, encoding="utf-8")
        cfg = read_run_config(path)

        assert cfg.font_path == str(tmp_path / "fonts/Roboto.ttf")
        assert (cfg.colorspace, cfg.format, cfg.on_error) == ("cmyk", "jpeg", "continue")
        assert cfg.context == {"issuer": "ACME"}
        assert [i["name"] for i in cfg.items] == ["Ada", "Grace"]

        job = cfg.outputs[0]
        assert job.prefix == "front"
        assert job.background == tmp_path / "bg/front.png"
        assert [o.type for o in job.overlays] == ["text", "qr"]
        assert job.overlays[0] == OverlayOptions(
            type="text", x_offset=10, y_offset=20, template="{name}", foreground="#ff1034",
        )
        assert job.overlays[1].size == 200
        assert job.overlays[1].rotation == 45

    def test_json_with_defaults(self, tmp_path):
        path = tmp_path / "job.json"
        path.write_text(json.dumps({"outputs": []}), encoding="utf-8")
        data = load_config(path)
        assert data["format"] == "png"
        assert data["colorspace"] == "rgba"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("outputs: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)


class TestParseOverlay:

    def test_defaults(self):
        opts = parse_overlay({"type": "text", "size": 0, "dpi": 0})
        assert (opts.size, opts.dpi, opts.rotation, opts.x_offset, opts.y_offset) == (12, 72, 0, 0, 0)

    def test_type_is_case_insensitive(self):
        assert parse_overlay({"type": "QR"}).type == "qr"

    @pytest.mark.parametrize("raw", [
        {"type": "video"},
        {"type": "text", "xoffset": -1},
        {"type": "text", "yoffset": -5},
        {"type": "text", "size": "big"},
        {"type": "text", "rotation": 4.5},
        {"type": "text", "foreground": 123},
        "text",
    ])
    def test_invalid(self, raw):
        with pytest.raises(ConfigError):
            parse_overlay(raw)


class TestParseRunConfig:

    def test_on_error_validated(self):
        with pytest.raises(ConfigError):
            parse_run_config({"on_error": "ignore"})

    def test_output_requires_background(self):
        with pytest.raises(ConfigError):
            parse_run_config({"outputs": [{"prefix": "x"}]})

    def test_items_must_be_mappings(self):
        with pytest.raises(ConfigError):
            parse_run_config({"items": ["a"]})

    def test_absolute_paths_kept(self, tmp_path):
        bg = str(tmp_path / "bg.png")
        cfg = parse_run_config({"outputs": [{"prefix": "p", "background": bg}]}, Path("/other"))
        assert cfg.outputs[0].background == Path(bg)
        assert cfg.font_path == ""
