"""Report batches handed to the reporters."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from linthawk_core.checks import Problem, Severity
from linthawk_core.discovery import FileCommits


@dataclass(frozen=True)
class Report:
    path: str
    problem: Problem
    rule: str | None = None


@dataclass
class Summary:
    reports: list[Report] = field(default_factory=list)
    file_changes: FileCommits = field(default_factory=FileCommits)

    def paths(self) -> list[str]:
        """Distinct paths referenced by reports, in first-seen order."""
        return list(dict.fromkeys(r.path for r in self.reports))


def summary_from_dict(data: dict) -> Summary:
    """Build a Summary from the plain structure used in report files.

    Expected shape::

        reports:
          - path: rules.yml
            rule: target is down
            problem:
              lines: [2, 3]
              reporter: promql/syntax
              text: syntax error
              severity: fatal
        file_changes:
          rules.yml: [3a1f9c0...]
    """
    reports = []
    for i, entry in enumerate(data.get("reports") or []):
        try:
            raw = entry["problem"]
            problem = Problem(
                lines=tuple(int(n) for n in raw["lines"]),
                reporter=str(raw["reporter"]),
                text=str(raw["text"]),
                severity=Severity.parse(raw["severity"]),
                fragment=str(raw.get("fragment") or ""),
            )
            reports.append(Report(path=str(entry["path"]), problem=problem, rule=entry.get("rule")))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid report #{i}: missing or malformed field {e}") from e

    file_changes = FileCommits.from_map(
        {str(path): [str(c) for c in commits or []] for path, commits in (data.get("file_changes") or {}).items()}
    )
    return Summary(reports=reports, file_changes=file_changes)


def load_summary(path: str) -> Summary:
    """Load a report file. JSON is valid YAML, so both formats are accepted."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Report file not found: {path}")
    with open(p, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Report file {path} must contain a mapping at the top level.")
    return summary_from_dict(data)
