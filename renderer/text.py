"""텍스트 렌더링 모듈 — TrueType 폰트로 문자열을 RGBA 비트맵으로 래스터화한다."""

import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from errors import FontLoadError, GlyphRenderError
from renderer.colors import BLACK, TRANSPARENT

logger = logging.getLogger(__name__)

# 잉크 영역 바깥 여백 (px, 한 변 기준)
MARGIN = 2
POINTS_PER_INCH = 72


@dataclass(frozen=True)
class FontContext:
    """실행 단위로 한 번 로드해 텍스트 오버레이에 전달하는 폰트.

    폰트 파일 바이트만 보관하며, 크기별 FreeTypeFont 객체는 내부에 캐싱한다.
    data가 비어 있으면 Pillow 내장 기본 폰트를 사용한다.
    """
    path: str = ""
    data: bytes = b""
    _cache: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    @classmethod
    def load(cls, path: str | Path | None) -> "FontContext":
        """폰트 파일을 읽고 파싱 가능한지 확인한다."""
        if not path:
            return cls()
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise FontLoadError(f"폰트 파일을 읽을 수 없음: {path} ({e})") from e
        ctx = cls(path=str(path), data=data)
        ctx.font(12)
        logger.info("폰트 로드: %s", path)
        return ctx

    def font(self, size: int) -> ImageFont.FreeTypeFont:
        """픽셀 크기에 맞는 폰트 객체를 반환한다 (캐싱)."""
        size = max(1, int(size))
        if size not in self._cache:
            try:
                if self.data:
                    self._cache[size] = ImageFont.truetype(BytesIO(self.data), size)
                else:
                    self._cache[size] = ImageFont.load_default(size)
            except (OSError, ValueError) as e:
                raise FontLoadError(f"폰트 파싱 실패: {self.path or '<default>'} ({e})") from e
        return self._cache[size]


def pixel_size(size_pt: float, dpi: int) -> int:
    """포인트 크기를 DPI 기준 픽셀 크기로 변환한다."""
    return max(1, round(size_pt * dpi / POINTS_PER_INCH))


def render_text(
    text: str,
    font: FontContext,
    size_pt: float = 12,
    dpi: int = POINTS_PER_INCH,
    color: tuple = BLACK,
    background: tuple = TRANSPARENT,
) -> Image.Image:
    """텍스트를 RGBA 이미지로 렌더링한다.

    실제 잉크 영역(getbbox) 크기에 MARGIN 여백을 더한 비트맵을 background 색으로
    채우고 그 위에 글자를 그린다. 안티앨리어싱은 유지한다.
    """
    fnt = font.font(pixel_size(size_pt, dpi))

    try:
        bbox = fnt.getbbox(text)
        w = max(bbox[2] - bbox[0], 0) + MARGIN * 2
        h = max(bbox[3] - bbox[1], 0) + MARGIN * 2
        offset_x = -bbox[0] + MARGIN
        offset_y = -bbox[1] + MARGIN

        # 글자 모양 마스크
        mask = Image.new("L", (w, h), 0)
        ImageDraw.Draw(mask).text((offset_x, offset_y), text, font=fnt, fill=255)
    except (OSError, ValueError, UnicodeError) as e:
        raise GlyphRenderError(f"텍스트 렌더링 실패: {text!r} ({e})") from e

    # 글자 색은 그대로 두고 알파에만 마스크를 반영 (straight alpha)
    if len(color) == 4 and color[3] < 255:
        mask = mask.point(lambda v: v * color[3] // 255)
    text_layer = Image.new("RGBA", (w, h), color)
    text_layer.putalpha(mask)

    img = Image.new("RGBA", (w, h), background)
    return Image.alpha_composite(img, text_layer)

