"""오버레이 회전 변환 모듈."""

from PIL import Image

from renderer.colors import TRANSPARENT


def rotate(layer: Image.Image, degrees: int) -> Image.Image:
    """0 < degrees < 360 일 때만 반시계 방향으로 회전한다.

    회전 결과는 바운딩 박스만큼 확장되고 새로 생긴 모서리는 투명으로 채운다.
    0, 360, 음수, 360 초과 값은 회전 없이 입력을 그대로 반환한다 (modulo 정규화 없음).
    """
    if not 0 < degrees < 360:
        return layer
    if layer.mode != "RGBA":
        layer = layer.convert("RGBA")
    return layer.rotate(
        degrees,
        resample=Image.Resampling.BICUBIC,
        expand=True,
        fillcolor=TRANSPARENT,
    )
