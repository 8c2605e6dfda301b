"""Dry-run reporter: print the review instead of posting it."""

from __future__ import annotations

from rich.console import Console

from linthawk_core.changeset import scope_summary
from linthawk_core.checks import Severity
from linthawk_core.errors import GitError
from linthawk_core.git import CommandRunner, head_commit
from linthawk_core.report import Summary
from linthawk_core.review import Review, build_review

_SEVERITY_COLOR = {
    Severity.FATAL: "red",
    Severity.BUG: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


class ConsoleReporter:
    def __init__(self, git_cmd: CommandRunner, console: Console | None = None, blame_workers: int = 4):
        self.git_cmd = git_cmd
        self.console = console or Console()
        self.blame_workers = blame_workers

    def submit(self, summary: Summary) -> Review:
        """Run the same filtering as the GitHub reporter and print the outcome.

        HEAD is looked up for display only; when git can't tell us, the review
        is still printed with an empty commit id.
        """
        try:
            commit_id = head_commit(self.git_cmd)
        except GitError:
            commit_id = ""

        anchored = scope_summary(summary, self.git_cmd, self.blame_workers)
        review = build_review(commit_id, anchored)

        if not anchored:
            self.console.print("[green]No problems on lines changed in this pull request.[/green]")
        else:
            self.console.print(
                f"\n[bold]Dry run: {review.verdict.value} review with {len(review.comments)} comment(s) "
                "(not posted)[/bold]\n"
            )
        for a in anchored:
            problem = a.report.problem
            color = _SEVERITY_COLOR[problem.severity]
            self.console.print(
                f"[bold cyan]{a.report.path}[/bold cyan]  line [bold]{a.line}[/bold]  "
                f"[{color}]{str(problem.severity).upper()}[/{color}]  [dim]{problem.reporter}[/dim]"
            )
            if problem.fragment:
                self.console.print(f"  [dim]{problem.fragment}[/dim]")
            self.console.print(f"  {problem.text}")
            self.console.print()
        return review
