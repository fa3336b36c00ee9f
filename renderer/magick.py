"""ImageMagick 외부 프로세스 합성 백엔드.

출력 파일을 배경 복사본으로 만든 뒤 오버레이마다 `composite -compose atop` 을
한 번씩 호출한다. 색공간(특히 CMYK)은 ImageMagick에 맡긴다.
"""

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Iterable

from errors import ConfigError, OutputWriteError, SubprocessError, overlay_scope
from renderer.encoder import normalize_format
from renderer.transform import rotate

logger = logging.getLogger(__name__)

# ImageMagick은 "rgb"만 이해한다
_COLORSPACES = {
    "rgba": "rgb",
    "rgb": "rgb",
    "cmyk": "cmyk",
}


def magick_colorspace(colorspace: str) -> str:
    key = (colorspace or "").lower()
    if key not in _COLORSPACES:
        raise ConfigError(f"{colorspace!r}는 잘못된 색공간입니다")
    return _COLORSPACES[key]


def run_tool(command: list[str]) -> str:
    """외부 명령을 실행하고 출력(stdout+stderr)을 반환한다. 실패 시 SubprocessError."""
    logger.debug("실행: %s", " ".join(command))
    try:
        proc = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except OSError as e:
        raise SubprocessError(command, f"실행 실패 ({e})") from e
    if proc.returncode != 0:
        output = (proc.stdout or "").strip()
        raise SubprocessError(command, f"종료 코드 {proc.returncode}: {output}", proc.returncode)
    return proc.stdout or ""


class MagickCompositor:
    """ImageMagick `convert`/`composite` 바이너리를 사용하는 합성기."""

    def __init__(self, bin_dir: str | Path, fmt: str = "png", colorspace: str = "rgba"):
        self._bin_dir = Path(bin_dir)
        normalize_format(fmt)
        self._colorspace = magick_colorspace(colorspace)

    def _tool(self, name: str) -> str:
        return str(self._bin_dir / name)

    def compose(self, background: str | Path, output: str | Path, overlays: Iterable) -> None:
        """배경 복사 → 오버레이별 composite 호출.

        실패하면 즉시 중단하며 이미 쓰여진 출력 파일은 되돌리지 않는다.
        임시 파일은 실패 여부와 관계없이 정리된다.
        """
        background, output = str(background), str(output)
        run_tool([self._tool("convert"), background, "(", "+clone", ")", "-composite", output])

        with tempfile.TemporaryDirectory(prefix="overlay-") as tmp_dir:
            for index, overlay in enumerate(overlays, start=1):
                with overlay_scope(index):
                    self._apply(overlay, Path(tmp_dir) / f"layer_{index:03d}.png", output)

    def _apply(self, overlay, layer_path: Path, output: str) -> None:
        result = overlay.render()
        layer = rotate(result.image, result.rotation)
        try:
            layer.save(layer_path, format="PNG")
        except OSError as e:
            raise OutputWriteError(f"임시 레이어 저장 실패: {layer_path} ({e})") from e

        run_tool([
            self._tool("composite"),
            "-colorspace", self._colorspace,
            "-compose", "atop",
            "-geometry", f"{result.x:+d}{result.y:+d}",
            str(layer_path), output, output,
        ])
