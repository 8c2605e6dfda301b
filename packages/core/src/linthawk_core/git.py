"""Version-control queries used by the reporters.

Everything here goes through a ``CommandRunner``: a callable taking the git
arguments and returning raw stdout bytes, raising ``GitError`` on failure. The
default runner shells out to ``git``; tests pass plain functions instead.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from linthawk_core.errors import GitError

logger = logging.getLogger(__name__)

CommandRunner = Callable[..., bytes]

_GIT_TIMEOUT = 60

# Keys git emits between a blame header and its content line.
_PORCELAIN_KEYS = frozenset(
    {
        "author",
        "author-mail",
        "author-time",
        "author-tz",
        "committer",
        "committer-mail",
        "committer-time",
        "committer-tz",
        "summary",
        "previous",
        "boundary",
        "filename",
    }
)


@dataclass(frozen=True)
class BlameRecord:
    commit_id: str
    line: int
    path: str
    content: str


def run_git(*args: str) -> bytes:
    """Run ``git <args>`` in the current directory and return its stdout."""
    cmd = ["git", *args]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, timeout=_GIT_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired) as e:
        raise GitError(f"git {args[0] if args else ''}: {e}") from e
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(f"git {' '.join(args)} exited with status {result.returncode}: {stderr}")
    return result.stdout


def head_commit(cmd: CommandRunner) -> str:
    return cmd("rev-parse", "HEAD").decode("utf-8", errors="replace").strip()


def blame(path: str, cmd: CommandRunner) -> list[BlameRecord]:
    return parse_blame(cmd("blame", "--line-porcelain", "--", path))


def parse_blame(output: bytes) -> list[BlameRecord]:
    """Parse ``git blame --line-porcelain`` output into one record per line.

    Each record starts with a ``<sha> <orig line> <final line> [<count>]`` header,
    continues with ``key value`` lines and ends with the TAB-prefixed content
    line. Anything that doesn't fit that shape is skipped: the format belongs to
    git, and one odd line must not cost us the rest of the file.
    """
    records: list[BlameRecord] = []
    commit_id: str | None = None
    line_no: int | None = None
    path: str | None = None

    for raw in output.decode("utf-8", errors="replace").splitlines():
        if raw.startswith("\t"):
            if commit_id is not None and line_no is not None and path is not None:
                records.append(BlameRecord(commit_id=commit_id, line=line_no, path=path, content=raw[1:]))
            else:
                logger.debug("Skipping blame content line without a complete header: %r", raw)
            commit_id = line_no = path = None
            continue

        key, _, value = raw.partition(" ")
        if key == "filename":
            path = value
            continue

        header = _parse_header(raw)
        if header is not None:
            commit_id, line_no = header
            path = None
        # Other porcelain keys (author, summary, boundary, ...) are not needed.

    return records


def _parse_header(raw: str) -> tuple[str, int] | None:
    parts = raw.split(" ")
    if len(parts) not in (3, 4) or parts[0] in _PORCELAIN_KEYS:
        return None
    try:
        numbers = [int(p) for p in parts[1:]]
    except ValueError:
        return None
    if numbers[1] < 1:
        return None
    return parts[0], numbers[1]
