"""이미지 파일 오버레이."""

from dataclasses import dataclass
from pathlib import Path

from content.overlay import RenderResult
from renderer.canvas import load_image


@dataclass(frozen=True)
class ImageOverlay:
    path: Path
    rotation: int = 0
    x: int = 0
    y: int = 0

    def render(self) -> RenderResult:
        img = load_image(self.path).convert("RGBA")
        return RenderResult(img, self.rotation, self.x, self.y)
