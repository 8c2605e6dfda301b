"""Decide which reports belong to the changeset under review."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from linthawk_core.blame import BlameIndex
from linthawk_core.discovery import FileCommits
from linthawk_core.git import CommandRunner
from linthawk_core.report import Report, Summary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnchoredReport:
    """A report that passed the filter, pinned to the line its comment goes on."""

    report: Report
    line: int


def anchor_line(path: str, lines: Sequence[int], index: BlameIndex, file_changes: FileCommits) -> int | None:
    """Return the first of ``lines`` last modified by a commit in this changeset.

    A problem spanning both changed and untouched lines is still reported, at its
    first changed line in the order the problem lists them.
    """
    for line in lines:
        commit = index.commit(path, line)
        if commit is not None and file_changes.has_commit(path, commit):
            return line
    return None


def filter_reports(reports: Iterable[Report], index: BlameIndex, file_changes: FileCommits) -> list[AnchoredReport]:
    anchored: list[AnchoredReport] = []
    for report in reports:
        line = anchor_line(report.path, report.problem.lines, index, file_changes)
        if line is None:
            logger.debug(
                "Skipping %s problem on %s:%s, no line was modified in this changeset",
                report.problem.reporter,
                report.path,
                list(report.problem.lines),
            )
            continue
        anchored.append(AnchoredReport(report=report, line=line))
    return anchored


def scope_summary(summary: Summary, cmd: CommandRunner, max_workers: int = 4) -> list[AnchoredReport]:
    """Blame every file the summary references and keep only in-scope reports."""
    index = BlameIndex.build(summary.paths(), cmd, max_workers=max_workers)
    return filter_reports(summary.reports, index, summary.file_changes)
