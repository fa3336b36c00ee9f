"""오버레이 공통 정의 — 렌더 결과 타입과 설정 → 생성기 팩토리."""

from pathlib import Path
from typing import NamedTuple, Protocol

from PIL import Image

from errors import ConfigError
from renderer.colors import BLACK, TRANSPARENT, get_color
from renderer.text import FontContext


class RenderResult(NamedTuple):
    """생성기가 돌려주는 비트맵 + 배치 정보."""
    image: Image.Image
    rotation: int
    x: int
    y: int


class Overlay(Protocol):
    def render(self) -> RenderResult: ...


def create_overlay(options, value: str, font: FontContext, base_dir: Path | None = None) -> Overlay:
    """오버레이 설정과 템플릿 적용 결과로 생성기 인스턴스를 만든다.

    Args:
        options: config.OverlayOptions
        value: 템플릿이 적용된 값 (text/qr은 내용, image는 파일 경로)
        font: 실행 단위 기본 폰트 (options.font 지정 시 호출 측에서 교체)
        base_dir: 상대 경로 기준 디렉토리 (image 타입)
    """
    from content.image import ImageOverlay
    from content.qr import QRCodeOverlay
    from content.text import TextOverlay

    fg = get_color(options.foreground, BLACK)
    bg = get_color(options.background, TRANSPARENT)

    if options.type == "qr":
        return QRCodeOverlay(value, options.size, fg, bg,
                             options.rotation, options.x_offset, options.y_offset)
    if options.type == "text":
        return TextOverlay(value, options.size, options.dpi, font, fg, bg,
                           options.rotation, options.x_offset, options.y_offset)
    if options.type == "image":
        path = Path(value)
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        return ImageOverlay(path, options.rotation, options.x_offset, options.y_offset)
    raise ConfigError(f"알 수 없는 오버레이 타입: {options.type!r}")
