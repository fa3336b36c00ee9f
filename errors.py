"""합성 파이프라인 예외 모듈.

라이브러리 코드는 예외를 던지기만 하고, 계속/중단 여부는 main.py가 결정한다.
"""

from contextlib import contextmanager


class CompositeError(Exception):
    """모든 합성 관련 예외의 기반 클래스.

    overlay_index: 실패한 오버레이 번호 (1부터). 오버레이와 무관하면 None.
    """
    overlay_index: int | None = None


class ConfigError(CompositeError):
    """잘못된 설정 (색공간, 출력 포맷, 오버레이 정의 등). 실행 전체를 중단한다."""


class AssetError(CompositeError):
    """배경/오버레이 원본 파일 문제."""


class AssetNotFound(AssetError):
    pass


class AssetDecodeError(AssetError):
    pass


class RenderError(CompositeError):
    """오버레이 생성기(텍스트, QR, 템플릿) 실패."""


class FontLoadError(RenderError):
    pass


class GlyphRenderError(RenderError):
    pass


class QREncodeError(RenderError):
    pass


class TemplateError(RenderError):
    pass


class SubprocessError(CompositeError):
    """외부 도구 실행 실패 (실행 불가 또는 0이 아닌 종료 코드)."""

    def __init__(self, command: list[str], message: str, returncode: int | None = None):
        super().__init__(f"{command[0]}: {message}")
        self.command = command
        self.returncode = returncode


class EncodeError(CompositeError):
    """최종 이미지 직렬화 실패."""


class OutputWriteError(CompositeError):
    """출력 파일 쓰기 실패."""


@contextmanager
def overlay_scope(index: int):
    """블록 안에서 발생한 CompositeError에 오버레이 번호(1부터)를 붙인다."""
    try:
        yield
    except CompositeError as e:
        if e.overlay_index is None:
            e.overlay_index = index
        raise
