"""Commits that belong to the changeset under review, grouped per file."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


class FileCommits:
    """Mapping of file path to the set of commit ids touching it in this changeset."""

    def __init__(self):
        self._commits: dict[str, set[str]] = {}

    @classmethod
    def from_map(cls, mapping: Mapping[str, Iterable[str]]) -> FileCommits:
        fc = cls()
        for path, commits in mapping.items():
            for commit in commits:
                fc.add(path, commit)
        return fc

    def add(self, path: str, commit: str) -> None:
        self._commits.setdefault(path, set()).add(commit)

    def has_commit(self, path: str, commit: str) -> bool:
        return commit in self._commits.get(path, ())

    def commits(self, path: str) -> frozenset[str]:
        return frozenset(self._commits.get(path, ()))

    def paths(self) -> list[str]:
        return sorted(self._commits)

    def __contains__(self, path: object) -> bool:
        return path in self._commits

    def __len__(self) -> int:
        return len(self._commits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileCommits):
            return NotImplemented
        return self._commits == other._commits

    def __repr__(self) -> str:
        commits = {path: sorted(c) for path, c in sorted(self._commits.items())}
        return f"FileCommits({commits!r})"
