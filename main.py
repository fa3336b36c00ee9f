"""메인 실행 — 설정 파일의 출력 작업 × 항목마다 합성 이미지를 생성한다."""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from config import OutputJob, RunConfig, read_run_config, resolve_path
from content.overlay import create_overlay
from content.template import build_context, render_template
from errors import CompositeError, ConfigError, overlay_scope
from renderer.layers import create_compositor
from renderer.text import FontContext


@dataclass
class JobFailure:
    """실패한 작업 하나의 기록."""
    prefix: str
    item_index: int
    error: CompositeError
    overlay_index: int | None = None

    @classmethod
    def from_error(cls, prefix: str, item_index: int, error: CompositeError) -> "JobFailure":
        return cls(prefix, item_index, error, error.overlay_index)

    def __str__(self) -> str:
        where = f"{self.prefix} #{self.item_index:04d}"
        if self.overlay_index is not None:
            where += f" overlay #{self.overlay_index}"
        return f"{where}: {type(self.error).__name__}: {self.error}"


class FontRegistry:
    """실행 단위 폰트 모음. 오버레이별 font 지정 시 경로별로 한 번만 로드한다."""

    def __init__(self, default: FontContext, base_dir: Path):
        self._default = default
        self._base_dir = base_dir
        self._fonts: dict[str, FontContext] = {}

    def get(self, path: str) -> FontContext:
        if not path:
            return self._default
        if path not in self._fonts:
            self._fonts[path] = FontContext.load(resolve_path(path, self._base_dir))
        return self._fonts[path]


def output_filename(index: int, prefix: str, fmt: str) -> str:
    return f"{index:04d}_{prefix}.{fmt}"


def build_overlays(job: OutputJob, context: dict, fonts: FontRegistry, base_dir: Path) -> list:
    """항목 컨텍스트로 템플릿을 적용해 오버레이 생성기 목록을 만든다."""
    overlays = []
    for idx, options in enumerate(job.overlays, start=1):
        logging.debug("    * %s 오버레이 #%d 추가", options.type, idx)
        with overlay_scope(idx):
            value = render_template(options.template, context)
            font = fonts.get(options.font) if options.type == "text" else fonts.get("")
            overlays.append(create_overlay(options, value, font, base_dir))
    return overlays


def run(config: RunConfig, out_dir: Path, magick_dir: str | None = None,
        on_error: str | None = None) -> list[JobFailure]:
    """모든 작업을 처리하고 실패 목록을 반환한다.

    ConfigError는 실행 전체의 설정 문제이므로 그대로 전파한다.
    그 외 오류는 on_error 정책("continue"/"abort")에 따라 처리한다.
    """
    policy = on_error or config.on_error
    # 포맷/색공간 검증은 어떤 파일도 열기 전에 끝낸다
    compositor = create_compositor(config.format, config.colorspace, magick_dir or config.magick_dir)
    fonts = FontRegistry(FontContext.load(config.font_path), config.base_dir)

    out_dir.mkdir(parents=True, exist_ok=True)
    items = config.items or ({},)
    failures: list[JobFailure] = []

    for job in config.outputs:
        logging.info("작업 처리: %s (%s)", job.prefix, job.background)
        for index, item in enumerate(items):
            logging.info("  항목 #%d", index + 1)
            out_path = out_dir / output_filename(index, job.prefix, config.format)
            try:
                context = build_context(config.context, item)
                overlays = build_overlays(job, context, fonts, config.base_dir)
                compositor.compose(job.background, out_path, overlays)
            except ConfigError:
                raise
            except CompositeError as e:
                failure = JobFailure.from_error(job.prefix, index, e)
                logging.error("  --> 실패: %s", failure)
                failures.append(failure)
                if policy == "abort":
                    return failures
                continue
            logging.info("  --> 생성: %s", out_path)

    return failures


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="배경 이미지 위에 텍스트/QR/이미지 오버레이를 합성한다.")
    parser.add_argument("-i", "--infile", required=True, help="작업 설정 파일 (JSON/YAML)")
    parser.add_argument("-o", "--outdir", default="output", help="출력 디렉토리 (기본: output)")
    parser.add_argument("-m", "--magick", default=None, help="ImageMagick 바이너리 디렉토리")
    parser.add_argument("--on-error", choices=("continue", "abort"), default=None,
                        help="작업 실패 시 동작 (기본: 설정 파일 값, 없으면 continue)")
    parser.add_argument("-v", "--verbose", action="store_true", help="디버그 로그 출력")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(message)s",
    )
    logging.getLogger("PIL").setLevel(logging.WARNING)

    try:
        config = read_run_config(args.infile)
        failures = run(config, Path(args.outdir), args.magick, args.on_error)
    except CompositeError as e:
        logging.error("실행 중단: %s: %s", type(e).__name__, e)
        return 1

    if failures:
        logging.error("실패 %d건:", len(failures))
        for failure in failures:
            logging.error("  %s", failure)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
