import copy
import os
import re
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "github": {
        "base_uri": "https://api.github.com",
        "upload_uri": "https://uploads.github.com",
        "timeout": 60,  # seconds, covers the whole review request
        "owner": None,
        "repo": None,
    },
    "blame_workers": 4,
}

_PULL_REF_RE = re.compile(r"^refs/pull/(\d+)/(?:merge|head)$")


def parse_pr_number(ref: Optional[str]) -> Optional[int]:
    """Extract the PR number from a ref like ``refs/pull/123/merge``."""
    if not ref:
        return None
    match = _PULL_REF_RE.match(ref.strip())
    return int(match.group(1)) if match else None


def load_config(config_path: str = ".linthawk.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .linthawk.yml in the current directory
      3. CLI argument overrides

    ``github.*`` overrides may be given flat (``{"timeout": 5}``) or nested.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        github = file_config.pop("github", None) or {}
        config.update(file_config)
        config["github"].update(github)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is None:
                continue
            if key in config["github"]:
                config["github"][key] = value
            else:
                config[key] = value

    # Fill the pull request target from the CI environment when not configured.
    gh = config["github"]
    repository = os.environ.get("GITHUB_REPOSITORY", "")
    if "/" in repository:
        owner, repo = repository.split("/", 1)
        gh["owner"] = gh["owner"] or owner
        gh["repo"] = gh["repo"] or repo

    if config.get("pr_number") is None:
        number = os.environ.get("GITHUB_PULL_REQUEST_NUMBER")
        if number and number.isdigit():
            config["pr_number"] = int(number)
        else:
            config["pr_number"] = parse_pr_number(os.environ.get("GITHUB_REF"))

    try:
        gh["timeout"] = float(gh["timeout"])
    except (TypeError, ValueError):
        raise ValueError(f"github.timeout must be a number of seconds, got {gh['timeout']!r}")
    if gh["timeout"] <= 0:
        raise ValueError("github.timeout must be greater than zero")

    return config
