"""QR 코드 오버레이 — 최고 오류 정정 레벨(H), 여백 없음, Lanczos 확대."""

import logging
from dataclasses import dataclass

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image

from content.overlay import RenderResult
from errors import QREncodeError
from renderer.colors import BLACK, TRANSPARENT

logger = logging.getLogger(__name__)


def qr_matrix(value: str) -> list[list[bool]]:
    """QR 모듈 행렬을 생성한다 (quiet zone 없음)."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=1,
        border=0,
    )
    qr.add_data(value)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as e:
        raise QREncodeError(f"QR 용량 초과: {len(value)}자 ({e})") from e
    return qr.get_matrix()


def render_qr(value: str, width: int, color: tuple = BLACK, background: tuple = TRANSPARENT) -> Image.Image:
    """모듈당 1픽셀로 그린 뒤 width x width 크기로 확대한다."""
    matrix = qr_matrix(value)
    n = len(matrix)
    img = Image.new("RGBA", (n, n), background)
    px = img.load()
    for y, row in enumerate(matrix):
        for x, dark in enumerate(row):
            if dark:
                px[x, y] = color
    width = max(1, int(width))
    logger.debug("QR %dx%d 모듈 → %dpx", n, n, width)
    return img.resize((width, width), Image.Resampling.LANCZOS)


@dataclass(frozen=True)
class QRCodeOverlay:
    value: str
    width: int
    color: tuple = BLACK
    background: tuple = TRANSPARENT
    rotation: int = 0
    x: int = 0
    y: int = 0

    def render(self) -> RenderResult:
        img = render_qr(self.value, self.width, self.color, self.background)
        return RenderResult(img, self.rotation, self.x, self.y)
