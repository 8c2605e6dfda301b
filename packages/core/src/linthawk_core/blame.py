"""Per-line commit attribution for the files referenced by a report batch."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from linthawk_core.git import CommandRunner, blame

logger = logging.getLogger(__name__)

_DEFAULT_WORKERS = 4


class BlameIndex:
    """Lookup of ``(path, line) -> commit id``.

    Built once per submission. A path whose blame failed maps to an empty dict,
    so every report on it resolves to nothing and gets filtered out.
    """

    def __init__(self, lines: dict[str, dict[int, str]] | None = None):
        self._lines: dict[str, dict[int, str]] = lines or {}

    @classmethod
    def build(cls, paths: Iterable[str], cmd: CommandRunner, max_workers: int = _DEFAULT_WORKERS) -> BlameIndex:
        unique = sorted(set(paths))
        if not unique:
            return cls()
        workers = max(1, min(max_workers, len(unique)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            resolved = list(pool.map(lambda p: _resolve(p, cmd), unique))
        return cls(dict(zip(unique, resolved)))

    def resolve(self, path: str) -> dict[int, str]:
        return dict(self._lines.get(path, {}))

    def commit(self, path: str, line: int) -> str | None:
        return self._lines.get(path, {}).get(line)

    def paths(self) -> list[str]:
        return sorted(self._lines)


def _resolve(path: str, cmd: CommandRunner) -> dict[int, str]:
    try:
        records = blame(path, cmd)
    except Exception as e:
        # Whatever went wrong, a file we cannot blame only loses its own problems.
        logger.warning("Could not blame %s, its problems will be skipped: %s", path, e)
        return {}

    lines: dict[int, str] = {}
    for record in records:
        # git blame on a renamed file reports the old name; we index by the path we asked about.
        lines[record.line] = record.commit_id
    logger.debug("Blamed %d line(s) of %s", len(lines), path)
    return lines
