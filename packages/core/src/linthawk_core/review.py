"""Turn filtered reports into a single GitHub pull request review."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from linthawk_core.changeset import AnchoredReport
from linthawk_core.checks import Severity

_SEVERITY_ICON = {
    Severity.INFO: ":information_source:",
    Severity.WARNING: ":warning:",
    Severity.BUG: ":stop_sign:",
    Severity.FATAL: ":stop_sign:",
}


class Verdict(str, Enum):
    """GitHub review events, highest priority first."""

    REQUEST_CHANGES = "REQUEST_CHANGES"
    COMMENT = "COMMENT"
    APPROVE = "APPROVE"


@dataclass(frozen=True)
class ReviewComment:
    path: str
    line: int
    body: str

    def to_payload(self) -> dict:
        return {"path": self.path, "line": self.line, "side": "RIGHT", "body": self.body}


@dataclass(frozen=True)
class Review:
    commit_id: str
    verdict: Verdict
    body: str
    comments: tuple[ReviewComment, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict:
        """Request body for ``POST /repos/{owner}/{repo}/pulls/{number}/reviews``."""
        return {
            "commit_id": self.commit_id,
            "body": self.body,
            "event": self.verdict.value,
            "comments": [c.to_payload() for c in self.comments],
        }


def comment_body(anchored: AnchoredReport) -> str:
    """Markdown body for one inline comment. Same report, same text."""
    report = anchored.report
    problem = report.problem
    header = f"{_SEVERITY_ICON[problem.severity]} **{problem.severity}** reported by `{problem.reporter}` check"
    if report.rule:
        header += f" on rule `{report.rule}`"
    return f"{header}.\n\n------\n\n{problem.text}\n"


def determine_verdict(anchored: Sequence[AnchoredReport]) -> Verdict:
    """Fatal problems block the merge, anything else is advisory."""
    if not anchored:
        return Verdict.APPROVE
    if any(a.report.problem.severity == Severity.FATAL for a in anchored):
        return Verdict.REQUEST_CHANGES
    return Verdict.COMMENT


def review_body(anchored: Sequence[AnchoredReport]) -> str:
    if not anchored:
        return "linthawk didn't find any problems on lines changed in this pull request."

    counts = {s: 0 for s in Severity}
    for a in anchored:
        counts[a.report.problem.severity] += 1
    parts = [f"{counts[s]} {str(s).lower()}" for s in sorted(Severity, reverse=True) if counts[s]]
    files = len({a.report.path for a in anchored})
    return (
        f"linthawk found {len(anchored)} problem(s) on lines changed in this pull request "
        f"({', '.join(parts)}) across {files} file(s)."
    )


def build_review(commit_id: str, anchored: Sequence[AnchoredReport]) -> Review:
    comments = tuple(ReviewComment(path=a.report.path, line=a.line, body=comment_body(a)) for a in anchored)
    return Review(
        commit_id=commit_id,
        verdict=determine_verdict(anchored),
        body=review_body(anchored),
        comments=comments,
    )
