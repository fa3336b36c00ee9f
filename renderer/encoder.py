"""최종 캔버스 인코딩/저장 모듈."""

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image

from errors import ConfigError, EncodeError, OutputWriteError

logger = logging.getLogger(__name__)

# 설정값 → Pillow 포맷 이름
_FORMATS = {
    "png": "PNG",
    "jpeg": "JPEG",
    "jpg": "JPEG",
}


def normalize_format(fmt: str) -> str:
    """출력 포맷 문자열을 Pillow 포맷 이름으로 바꾼다. 지원하지 않으면 ConfigError."""
    key = (fmt or "").strip().lower()
    if key not in _FORMATS:
        raise ConfigError(f"{fmt!r}는 지원하지 않는 출력 포맷입니다 (png, jpeg)")
    return _FORMATS[key]


def encode(image: Image.Image, fmt: str) -> bytes:
    """이미지를 지정 포맷의 바이트열로 직렬화한다.

    JPEG는 알파 채널을 지원하지 않으므로 RGB로 변환한 뒤 기본 품질로 저장한다.
    """
    pil_format = normalize_format(fmt)
    if pil_format == "JPEG" and image.mode != "RGB":
        image = image.convert("RGB")

    buf = BytesIO()
    try:
        image.save(buf, format=pil_format)
    except (OSError, ValueError) as e:
        raise EncodeError(f"{pil_format} 인코딩 실패: {e}") from e
    return buf.getvalue()


def write_output(path: str | Path, data: bytes) -> None:
    try:
        Path(path).write_bytes(data)
    except OSError as e:
        raise OutputWriteError(f"출력 파일 쓰기 실패: {path} ({e})") from e
    logger.debug("%d 바이트 저장: %s", len(data), path)
