"""submit command — post a report file as a pull request review."""

from __future__ import annotations

import click
from rich.console import Console

from linthawk_core.console import ConsoleReporter
from linthawk_core.errors import LinthawkError
from linthawk_core.gh.reporter import GithubReporter
from linthawk_core.git import run_git
from linthawk_core.report import load_summary

console = Console()


@click.command("submit")
@click.argument("report_file", type=click.Path(dir_okay=False))
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number. Defaults to the CI environment.")
@click.option("--owner", default=None, help="Repository owner. Overrides config file.")
@click.option("--repo", default=None, help="Repository name. Overrides config file.")
@click.option("--timeout", type=float, default=None, help="Seconds allowed for posting the review.")
@click.option(
    "--dry-run",
    "-n",
    "dry_run",
    is_flag=True,
    help="Print the review instead of posting it to GitHub.",
)
@click.pass_context
def submit_cmd(
    ctx,
    report_file: str,
    pr_number: int | None,
    owner: str | None,
    repo: str | None,
    timeout: float | None,
    dry_run: bool,
):
    """Post problems from REPORT_FILE on lines changed by the pull request.

    REPORT_FILE is YAML or JSON with ``reports`` and ``file_changes`` keys.
    Problems on lines not modified by commits listed in ``file_changes`` are
    skipped.

    \b
    Environment variables:
      GITHUB_AUTH_TOKEN / GITHUB_TOKEN   GitHub token (or use gh CLI)
      GITHUB_REPOSITORY                  owner/repo of the pull request
      GITHUB_PULL_REQUEST_NUMBER         pull request number
      GITHUB_REF                         refs/pull/<number>/merge
    """
    from linthawk_cli.auth import resolve_github_token
    from linthawk_core.config import load_config

    config_path = (ctx.obj or {}).get("config_path", ".linthawk.yml")
    try:
        config = load_config(
            config_path,
            cli_overrides={"owner": owner, "repo": repo, "timeout": timeout, "pr_number": pr_number},
        )
        summary = load_summary(report_file)
    except (FileNotFoundError, ValueError) as e:
        raise click.UsageError(str(e))

    if dry_run:
        ConsoleReporter(run_git, console=console, blame_workers=config["blame_workers"]).submit(summary)
        return

    # Resolve token: env vars first, then gh CLI session.
    token = resolve_github_token()
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_AUTH_TOKEN or GITHUB_TOKEN, or run `gh auth login` first."
        )
    gh = config["github"]
    if not gh["owner"] or not gh["repo"]:
        raise click.UsageError("Repository unknown. Pass --owner and --repo or set GITHUB_REPOSITORY.")
    if config["pr_number"] is None:
        raise click.UsageError("Pull request number unknown. Pass --pr or set GITHUB_PULL_REQUEST_NUMBER.")

    reporter = GithubReporter(
        base_uri=gh["base_uri"],
        upload_uri=gh["upload_uri"],
        timeout=gh["timeout"],
        token=token,
        owner=gh["owner"],
        repo=gh["repo"],
        pr_number=config["pr_number"],
        git_cmd=run_git,
        blame_workers=config["blame_workers"],
    )
    try:
        reporter.submit(summary)
    except LinthawkError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)

    console.print(f"[green]Review posted on {gh['owner']}/{gh['repo']}#{config['pr_number']}.[/green]")
