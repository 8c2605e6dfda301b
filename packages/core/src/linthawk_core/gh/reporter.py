"""Publish in-scope problems as a GitHub pull request review."""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeout

import requests
from github import Auth, Github, GithubException

from linthawk_core.changeset import scope_summary
from linthawk_core.errors import (
    AuthRejectedError,
    GitError,
    HeadCommitError,
    ReviewSubmissionError,
    ReviewTimeoutError,
)
from linthawk_core.git import CommandRunner, head_commit
from linthawk_core.report import Summary
from linthawk_core.review import Review, build_review

logger = logging.getLogger(__name__)


class BearerToken(Auth.Token):
    """Token auth sent as ``Authorization: Bearer <token>``."""

    @property
    def token_type(self) -> str:
        return "Bearer"


class GithubReporter:
    """Posts one review per ``submit`` call on a single pull request.

    ``timeout`` (seconds) bounds the whole review request: when it runs out the
    call raises ``ReviewTimeoutError`` straight away and the in-flight request is
    abandoned. Nothing is retried.
    """

    def __init__(
        self,
        base_uri: str,
        upload_uri: str,
        timeout: float,
        token: str,
        owner: str,
        repo: str,
        pr_number: int,
        git_cmd: CommandRunner,
        blame_workers: int = 4,
    ):
        self.base_uri = base_uri.rstrip("/")
        # Reviews never upload assets; kept so GitHub Enterprise setups configure
        # both endpoints in one place.
        self.upload_uri = upload_uri.rstrip("/")
        self.timeout = timeout
        self.token = token
        self.owner = owner
        self.repo = repo
        self.pr_number = pr_number
        self.git_cmd = git_cmd
        self.blame_workers = blame_workers

    @property
    def reviews_url(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/pulls/{self.pr_number}/reviews"

    def submit(self, summary: Summary) -> None:
        try:
            commit_id = head_commit(self.git_cmd)
        except GitError as e:
            raise HeadCommitError(e) from e

        review = build_review(commit_id, scope_summary(summary, self.git_cmd, self.blame_workers))
        logger.info(
            "Creating %s review with %d comment(s) on %s/%s#%d",
            review.verdict.value,
            len(review.comments),
            self.owner,
            self.repo,
            self.pr_number,
        )
        self.create_review(review)

    def create_review(self, review: Review) -> None:
        """Send ``review`` in a single request, bounded by ``self.timeout``.

        The request runs on a daemon thread. When the deadline passes, the
        client session is closed and the thread is left behind; it can never
        keep the process alive.
        """
        gh = self._client()
        outcome: Future = Future()
        outcome.set_running_or_notify_cancel()

        def post():
            try:
                gh.requester.requestJsonAndCheck("POST", self.reviews_url, input=review.to_payload())
            except Exception as e:
                outcome.set_exception(e)
            else:
                outcome.set_result(None)

        threading.Thread(target=post, name="linthawk-review", daemon=True).start()
        try:
            outcome.result(timeout=self.timeout)
        except (FutureTimeout, requests.Timeout) as e:
            logger.error("Review request to %s timed out after %ss", self.base_uri, self.timeout)
            raise ReviewTimeoutError() from e
        except GithubException as e:
            if e.status in (401, 403):
                raise AuthRejectedError(_describe(e)) from e
            raise ReviewSubmissionError(_describe(e)) from e
        except requests.RequestException as e:
            raise ReviewSubmissionError(e) from e
        finally:
            # A timed-out request stays on its daemon thread; only the session is released here.
            gh.close()
        logger.info("Review posted on %s/%s#%d", self.owner, self.repo, self.pr_number)

    def _client(self) -> Github:
        return Github(
            auth=BearerToken(self.token) if self.token else None,
            base_url=self.base_uri,
            # PyGithub wants whole seconds; the deadline in create_review is what bounds the call.
            timeout=max(1, math.ceil(self.timeout)),
            retry=None,
            # A fresh client sends exactly one request, so there is nothing to throttle.
            seconds_between_requests=None,
            seconds_between_writes=None,
        )


def _describe(e: GithubException) -> str:
    """Prefer GitHub's own message over the raw JSON dump."""
    data = e.data
    if isinstance(data, dict):
        message = data.get("message") or data.get("data")
        if message:
            return f"{e.status} {message}"
    return str(e)
