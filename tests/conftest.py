"""합성기 테스트 공통 pytest 설정과 픽스처."""

import sys
from pathlib import Path

import pytest
from PIL import Image

# 프로젝트 루트를 import 경로에 추가
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from content.overlay import RenderResult  # noqa: E402


# =============================================================================
# 헬퍼
# =============================================================================

class StaticOverlay:
    """고정 비트맵을 돌려주는 오버레이 대역. render 호출 횟수를 센다."""

    def __init__(self, image, rotation=0, x=0, y=0):
        self.result = RenderResult(image, rotation, x, y)
        self.calls = 0

    def render(self):
        self.calls += 1
        return self.result


# =============================================================================
# 공통 픽스처
# =============================================================================

@pytest.fixture
def solid():
    """단색 RGBA 비트맵 생성 함수."""
    def _make(color, size=(4, 4)):
        return Image.new("RGBA", size, color)
    return _make


@pytest.fixture
def background_path(tmp_path) -> Path:
    """10x8 불투명 초록색 PNG 배경."""
    path = tmp_path / "background.png"
    Image.new("RGBA", (10, 8), (0, 255, 0, 255)).save(path)
    return path


@pytest.fixture
def static_overlay():
    return StaticOverlay
