"""텍스트 오버레이."""

from dataclasses import dataclass

from content.overlay import RenderResult
from renderer.colors import BLACK, TRANSPARENT
from renderer.text import FontContext, render_text


@dataclass(frozen=True)
class TextOverlay:
    value: str
    size: int
    dpi: int
    font: FontContext
    color: tuple = BLACK
    background: tuple = TRANSPARENT
    rotation: int = 0
    x: int = 0
    y: int = 0

    def render(self) -> RenderResult:
        img = render_text(self.value, self.font, self.size, self.dpi, self.color, self.background)
        return RenderResult(img, self.rotation, self.x, self.y)
