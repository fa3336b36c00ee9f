"""설정 파일 로더 모듈 — JSON/YAML 작업 정의를 읽어 데이터클래스로 변환한다."""

import json
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from errors import ConfigError

OVERLAY_TYPES = ("image", "text", "qr")
ERROR_POLICIES = ("continue", "abort")

# 기본값 — 설정 파일에 누락된 키가 있을 때 사용
_DEFAULTS = {
    "fontpath": "",
    "colorspace": "rgba",
    "format": "png",
    "magick": "",
    "on_error": "continue",
    "context": {},
    "items": [],
    "outputs": [],
}

_OVERLAY_DEFAULT_SIZE = 12   # pt (text) / px (qr)
_OVERLAY_DEFAULT_DPI = 72


@dataclass(frozen=True)
class OverlayOptions:
    """출력 작업 하나에 들어가는 오버레이 정의."""
    type: str
    rotation: int = 0
    x_offset: int = 0
    y_offset: int = 0
    size: int = _OVERLAY_DEFAULT_SIZE
    dpi: int = _OVERLAY_DEFAULT_DPI
    font: str = ""
    template: str = ""
    foreground: str = ""
    background: str = ""


@dataclass(frozen=True)
class OutputJob:
    """배경 이미지 하나와 그 위에 올릴 오버레이 목록."""
    prefix: str
    background: Path
    overlays: tuple[OverlayOptions, ...] = ()


@dataclass(frozen=True)
class RunConfig:
    font_path: str = ""
    colorspace: str = "rgba"
    format: str = "png"
    magick_dir: str = ""
    on_error: str = "continue"
    context: dict = field(default_factory=dict)
    items: tuple[dict, ...] = ()
    outputs: tuple[OutputJob, ...] = ()
    base_dir: Path = Path(".")


def _deep_merge(base: dict, override: dict) -> dict:
    """base 딕셔너리에 override 값을 병합한다 (깊은 병합)."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as e:
        raise ConfigError(f"설정 파일을 읽을 수 없음: {path} ({e})") from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"설정 파일 파싱 실패: {path} ({e})") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"설정 파일 최상위는 매핑이어야 합니다: {path}")
    return data


def load_config(path: Path | str) -> dict:
    """설정 파일을 읽어 기본값과 병합한 딕셔너리로 반환한다."""
    return _deep_merge(_DEFAULTS, _read(Path(path)))


def _int(raw: dict, key: str, default: int, where: str) -> int:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{where}: {key}는 정수여야 합니다 ({value!r})")
    return value


def _str(raw: dict, key: str, where: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"{where}: {key}는 문자열이어야 합니다 ({value!r})")
    return value


def parse_overlay(raw: dict, where: str = "overlay") -> OverlayOptions:
    """오버레이 딕셔너리를 검증해 OverlayOptions로 변환한다.

    size/dpi 가 0이면 기본값(12, 72)을 쓴다. 오프셋은 음수일 수 없다.
    """
    if not isinstance(raw, dict):
        raise ConfigError(f"{where}: 매핑이어야 합니다")
    kind = _str(raw, "type", where).lower()
    if kind not in OVERLAY_TYPES:
        raise ConfigError(f"{where}: 알 수 없는 오버레이 타입 {kind!r}")

    x_offset = _int(raw, "xoffset", 0, where)
    y_offset = _int(raw, "yoffset", 0, where)
    if x_offset < 0 or y_offset < 0:
        raise ConfigError(f"{where}: 오프셋은 음수일 수 없습니다 ({x_offset}, {y_offset})")

    return OverlayOptions(
        type=kind,
        rotation=_int(raw, "rotation", 0, where),
        x_offset=x_offset,
        y_offset=y_offset,
        size=_int(raw, "size", 0, where) or _OVERLAY_DEFAULT_SIZE,
        dpi=_int(raw, "dpi", 0, where) or _OVERLAY_DEFAULT_DPI,
        font=_str(raw, "font", where),
        template=str(raw.get("template") or ""),
        foreground=_str(raw, "foreground", where),
        background=_str(raw, "background", where),
    )


def parse_output(raw: dict, base_dir: Path) -> OutputJob:
    if not isinstance(raw, dict):
        raise ConfigError("outputs 항목은 매핑이어야 합니다")
    prefix = _str(raw, "prefix", "output")
    background = _str(raw, "background", f"output {prefix!r}")
    if not prefix or not background:
        raise ConfigError(f"output {prefix!r}: prefix와 background가 필요합니다")
    overlays = tuple(
        parse_overlay(o, f"output {prefix!r} overlay #{i + 1}")
        for i, o in enumerate(raw.get("overlays") or [])
    )
    return OutputJob(prefix=prefix, background=resolve_path(background, base_dir), overlays=overlays)


def resolve_path(value: str, base_dir: Path) -> Path:
    """상대 경로는 설정 파일 디렉토리 기준으로 해석한다."""
    path = Path(value)
    return path if path.is_absolute() else base_dir / path


def parse_run_config(data: dict, base_dir: Path = Path(".")) -> RunConfig:
    """병합된 설정 딕셔너리를 RunConfig로 변환한다."""
    data = _deep_merge(_DEFAULTS, data)

    on_error = str(data["on_error"]).lower()
    if on_error not in ERROR_POLICIES:
        raise ConfigError(f"on_error는 {ERROR_POLICIES} 중 하나여야 합니다 ({on_error!r})")
    if not isinstance(data["context"], dict):
        raise ConfigError("context는 매핑이어야 합니다")
    items = data["items"] or []
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise ConfigError("items는 매핑의 리스트여야 합니다")

    font_path = _str(data, "fontpath", "config")
    return RunConfig(
        font_path=str(resolve_path(font_path, base_dir)) if font_path else "",
        colorspace=str(data["colorspace"]).lower(),
        format=str(data["format"]).lower(),
        magick_dir=_str(data, "magick", "config"),
        on_error=on_error,
        context=dict(data["context"]),
        items=tuple(items),
        outputs=tuple(parse_output(o, base_dir) for o in data["outputs"] or []),
        base_dir=base_dir,
    )


def read_run_config(path: Path | str) -> RunConfig:
    """설정 파일을 읽어 RunConfig를 반환한다. 상대 경로는 파일 위치 기준."""
    path = Path(path)
    return parse_run_config(load_config(path), base_dir=path.parent)
