"""배경 이미지 기반 RGBA 캔버스 관리 모듈."""

import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from errors import AssetDecodeError, AssetNotFound

logger = logging.getLogger(__name__)

MAX_ALPHA = 255.0


def load_image(path: str | Path) -> Image.Image:
    """이미지 파일을 열어 디코딩까지 끝낸 뒤 반환한다."""
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except FileNotFoundError as e:
        raise AssetNotFound(f"이미지 파일 없음: {path}") from e
    except (UnidentifiedImageError, OSError) as e:
        raise AssetDecodeError(f"이미지 디코딩 실패: {path} ({e})") from e


def blend(src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """straight alpha 선형 보간으로 src를 dst 위에 합성한다.

    알파 채널을 포함한 모든 채널에 같은 식을 적용한다:
        dst[c] = round(src[c] * a + dst[c] * (1 - a)),  a = src.alpha / 255

    Args:
        src: (H, W, 4) uint8 오버레이 픽셀
        dst: (H, W, 4) uint8 캔버스 픽셀 (같은 크기)

    Returns:
        (H, W, 4) uint8 합성 결과
    """
    src_f = src.astype(np.float64)
    alpha = src_f[..., 3:4] / MAX_ALPHA
    beta = 1.0 - alpha
    out = np.rint(src_f * alpha + dst.astype(np.float64) * beta)
    return out.astype(np.uint8)


class Canvas:
    """작업 하나 동안 사용하는 RGBA 캔버스. 크기는 배경 이미지로 고정된다."""

    def __init__(self, background: Image.Image):
        if background.mode != "RGBA":
            background = background.convert("RGBA")
        self._pixels = np.array(background, dtype=np.uint8)

    @classmethod
    def from_file(cls, path: str | Path) -> "Canvas":
        return cls(load_image(path))

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def image(self) -> Image.Image:
        return Image.fromarray(self._pixels)

    def apply(self, layer: Image.Image, x: int, y: int) -> None:
        """레이어를 (x, y) 위치에 알파 블렌딩한다.

        캔버스 밖으로 나가는 픽셀은 조용히 버린다 (좌/상단, 우/하단 모두).
        """
        if layer.mode != "RGBA":
            layer = layer.convert("RGBA")
        lw, lh = layer.size

        # 캔버스와 겹치는 영역 계산
        left, top = max(x, 0), max(y, 0)
        right, bottom = min(x + lw, self.width), min(y + lh, self.height)
        if left >= right or top >= bottom:
            logger.debug("레이어가 캔버스 밖에 있음: (%d, %d) %dx%d", x, y, lw, lh)
            return

        src = np.asarray(layer, dtype=np.uint8)[top - y:bottom - y, left - x:right - x]
        region = self._pixels[top:bottom, left:right]
        self._pixels[top:bottom, left:right] = blend(src, region)
