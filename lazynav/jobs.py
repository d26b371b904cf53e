"""Move/copy job runner used to put pending files into a directory."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path

PutJob = Callable[[list[Path], Path, bool], None]


def put_command(paths: list[Path], destination: Path, copy: bool) -> list[str]:
    """Return the ``cp``/``mv`` argv that puts ``paths`` into ``destination``."""
    cmd = ["cp", "-R"] if copy else ["mv"]
    cmd.append("--")
    cmd.extend(str(path) for path in paths)
    cmd.append(str(destination))
    return cmd


def put_files(paths: list[Path], destination: Path, copy: bool) -> None:
    """Copy or move ``paths`` into ``destination``.

    Raises ``subprocess.CalledProcessError`` when the command fails and
    ``OSError`` when it cannot be started.
    """
    subprocess.run(
        put_command(paths, destination, copy),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        check=True,
    )


__all__ = [
    "PutJob",
    "put_command",
    "put_files",
]
