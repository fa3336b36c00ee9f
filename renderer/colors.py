"""색상 문자열 파싱 모듈."""

import re

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
TRANSPARENT = (0, 0, 0, 0)

_NAMED = {
    "black": BLACK,
    "white": WHITE,
    "transparent": TRANSPARENT,
}

_HEX3 = re.compile(r"#([0-9a-fA-F])([0-9a-fA-F])([0-9a-fA-F])")
_HEX6 = re.compile(r"#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})")


def parse_hex(text: str) -> tuple[int, int, int, int] | None:
    """"#f0c" 또는 "#ff1034" 형식을 RGBA로 변환한다. 형식이 틀리면 None.

    3자리 형식은 각 자리값에 16을 곱한다 ("#f0c" → (240, 0, 192)).
    """
    m = _HEX3.fullmatch(text)
    if m:
        r, g, b = (int(v, 16) * 16 for v in m.groups())
        return (r, g, b, 255)
    m = _HEX6.fullmatch(text)
    if m:
        r, g, b = (int(v, 16) for v in m.groups())
        return (r, g, b, 255)
    return None


def get_color(text: str | None, default: tuple) -> tuple:
    """색상 이름/헥스 문자열을 RGBA로 변환한다. 해석할 수 없으면 default."""
    if not text:
        return default
    if text in _NAMED:
        return _NAMED[text]
    if text.startswith("#"):
        color = parse_hex(text)
        if color is not None:
            return color
    return default
