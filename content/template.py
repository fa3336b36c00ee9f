"""오버레이 값 템플릿 모듈.

Python format 문법을 사용한다:
    "{name}"          컨텍스트 값 치환
    "{lat:.8f}"       소수점 자리 지정
    "{key!1}"         문자열 앞 절반
    "{key!2}"         문자열 뒤 절반
"""

from string import Formatter

from errors import TemplateError


def first_half(s: str) -> str:
    """홀수 길이면 앞 절반이 더 짧다."""
    return s[:len(s) // 2]


def second_half(s: str) -> str:
    return s[len(s) // 2:]


class _OverlayFormatter(Formatter):
    _CONVERSIONS = {
        "1": first_half,
        "2": second_half,
    }

    def convert_field(self, value, conversion):
        if conversion in self._CONVERSIONS:
            return self._CONVERSIONS[conversion](str(value))
        return super().convert_field(value, conversion)


_formatter = _OverlayFormatter()


def build_context(context: dict, item: dict) -> dict:
    """공통 컨텍스트에 항목별 값을 덮어쓴 새 딕셔너리를 반환한다."""
    merged = dict(context)
    merged.update(item)
    return merged


def render_template(template: str, context: dict) -> str:
    """템플릿 문자열에 컨텍스트를 적용한다."""
    try:
        return _formatter.vformat(template, (), context)
    except KeyError as e:
        raise TemplateError(f"템플릿 변수 없음: {e} (template={template!r})") from e
    except (IndexError, ValueError, AttributeError, TypeError) as e:
        raise TemplateError(f"템플릿 오류: {e} (template={template!r})") from e
