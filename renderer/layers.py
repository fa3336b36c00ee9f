"""레이어 합성 모듈 — 배경 + 오버레이 → 출력 파일.

두 가지 백엔드를 제공한다:
    NativeCompositor  프로세스 내부에서 Canvas로 합성 (RGB/RGBA)
    MagickCompositor  ImageMagick을 호출해 합성 (CMYK 지원, renderer/magick.py)
"""

import logging
from pathlib import Path
from typing import Iterable

from errors import ConfigError, overlay_scope
from renderer.canvas import Canvas
from renderer.encoder import encode, normalize_format, write_output
from renderer.transform import rotate

logger = logging.getLogger(__name__)

NATIVE_COLORSPACES = ("rgb", "rgba")


class NativeCompositor:
    """Canvas 기반 합성기."""

    def __init__(self, fmt: str = "png", colorspace: str = "rgba"):
        self._format = fmt
        normalize_format(fmt)
        colorspace = (colorspace or "").lower()
        if colorspace == "cmyk":
            raise ConfigError(
                f"cmyk 색공간은 {fmt} 출력에서 지원하지 않습니다 (ImageMagick 경로를 지정하세요)"
            )
        if colorspace not in NATIVE_COLORSPACES:
            raise ConfigError(f"{colorspace!r}는 잘못된 색공간입니다")
        self._colorspace = colorspace

    def compose(self, background: str | Path, output: str | Path, overlays: Iterable) -> None:
        """배경 위에 오버레이들을 순서대로 합성하여 output에 저장한다.

        Args:
            background: 배경 이미지 경로
            output: 출력 파일 경로
            overlays: render() -> RenderResult 를 가진 생성기 목록 (z-order 순)
        """
        canvas = Canvas.from_file(background)
        logger.debug("캔버스 생성: %s %dx%d", background, canvas.width, canvas.height)

        for index, overlay in enumerate(overlays, start=1):
            with overlay_scope(index):
                result = overlay.render()
            layer = rotate(result.image, result.rotation)
            logger.debug("  레이어 #%d: %dx%d at (%d, %d) rot=%d",
                         index, layer.width, layer.height, result.x, result.y, result.rotation)
            canvas.apply(layer, result.x, result.y)

        image = canvas.image
        if self._colorspace == "rgb":
            image = image.convert("RGB")
        write_output(output, encode(image, self._format))


def create_compositor(fmt: str, colorspace: str, magick_dir: str | Path | None = None):
    """설정에 맞는 합성 백엔드를 반환한다.

    색공간/포맷 오류는 어떤 파일도 열기 전에 ConfigError로 보고한다.
    """
    if magick_dir:
        from renderer.magick import MagickCompositor
        logger.info("ImageMagick 백엔드 사용: %s", magick_dir)
        return MagickCompositor(magick_dir, fmt, colorspace)
    return NativeCompositor(fmt, colorspace)
