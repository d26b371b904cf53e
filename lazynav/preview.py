"""Preview registers: the first lines of a file, cached per path.

Lines come either from an external previewer process or from reading the file
directly. Any NUL byte collapses the preview to a single ``BINARY_LINE``.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

from .options import NavOptions

logger = logging.getLogger(__name__)

BINARY_LINE = "\033[1mbinary\033[0m"
LOADING_LINE = "\033[1mloading...\033[0m"
MAX_LINE_BYTES = 64 * 1024


@dataclass(eq=False)
class Register:
    """Cached preview content for one path."""

    path: Path
    lines: list[str] = field(default_factory=list)
    loading: bool = False

    @classmethod
    def placeholder(cls, path: Path) -> Register:
        return cls(path=path, lines=[LOADING_LINE], loading=True)

    @property
    def is_binary(self) -> bool:
        return self.lines == [BINARY_LINE]


def read_preview_lines(stream: BinaryIO, height: int) -> tuple[list[str], bool]:
    """Read up to ``height`` lines from ``stream``.

    Returns ``(lines, is_binary)``; reading stops at the first NUL byte. A read
    error is logged and the lines read so far are returned.
    """
    lines: list[str] = []
    for _ in range(max(0, height)):
        try:
            raw = stream.readline(MAX_LINE_BYTES)
        except OSError as exc:
            logger.error("loading file: %s", exc)
            break
        if not raw:
            break
        if b"\x00" in raw:
            return [BINARY_LINE], True
        lines.append(raw.decode("utf-8", errors="replace").rstrip("\r\n"))
        if len(raw) >= MAX_LINE_BYTES and not raw.endswith(b"\n"):
            # Overlong line: keep its head and stop.
            break
    return lines, False


def highlight_lines(path: Path, lines: list[str], style: str) -> list[str]:
    """Colorize preview lines with Pygments, keeping the same line count."""
    if not lines:
        return lines
    try:
        lexer = get_lexer_for_filename(path.name, stripnl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False)
    try:
        formatter = TerminalFormatter(style=style)
    except ClassNotFound:
        formatter = TerminalFormatter()
    rendered = highlight("\n".join(lines) + "\n", lexer, formatter)
    return rendered.split("\n")[: len(lines)]


def _wait_in_background(proc: subprocess.Popen) -> None:
    threading.Thread(
        target=proc.wait,
        name="lazynav-previewer-wait",
        daemon=True,
    ).start()


def _preview_with_command(previewer: str, path: Path, height: int) -> tuple[list[str], bool]:
    try:
        proc = subprocess.Popen(
            [previewer, str(path), str(height)],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
        )
    except OSError as exc:
        logger.error("previewing file: %s", exc)
        return [], False

    assert proc.stdout is not None
    try:
        return read_preview_lines(proc.stdout, height)
    finally:
        proc.stdout.close()
        _wait_in_background(proc)


def _preview_file(path: Path, height: int) -> tuple[list[str], bool]:
    try:
        stream = open(path, "rb")
    except OSError as exc:
        logger.error("opening file: %s", exc)
        return [], False

    with stream:
        return read_preview_lines(stream, height)


def build_register(path: Path, height: int, options: NavOptions) -> Register:
    """Produce the finished preview register for ``path``."""
    if options.previewer:
        lines, _is_binary = _preview_with_command(options.previewer, path, height)
        return Register(path=path, lines=lines)

    lines, _is_binary = _preview_file(path, height)
    register = Register(path=path, lines=lines)
    if options.highlight and not register.is_binary:
        register.lines = highlight_lines(path, register.lines, options.style)
    return register


__all__ = [
    "BINARY_LINE",
    "LOADING_LINE",
    "MAX_LINE_BYTES",
    "Register",
    "read_preview_lines",
    "highlight_lines",
    "build_register",
]
