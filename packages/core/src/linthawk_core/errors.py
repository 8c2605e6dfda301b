"""Exception hierarchy shared by the reporters.

Blame gaps are not errors: a report whose line cannot be blamed is dropped by the
change set filter. Only resolving the head commit and the review submission
itself can fail a run.
"""

from __future__ import annotations

DEADLINE_EXCEEDED = "context deadline exceeded"


class LinthawkError(Exception):
    """Base class for all linthawk errors."""


class GitError(LinthawkError):
    """A version-control command failed or could not be started."""


class HeadCommitError(LinthawkError):
    def __init__(self, cause: object):
        super().__init__(f"failed to get HEAD commit: {cause}")


class ReviewSubmissionError(LinthawkError):
    """Creating the pull request review failed.

    The underlying exception is kept as ``__cause__`` so callers can tell a slow
    network apart from bad credentials or a platform outage.
    """

    prefix = "creating review: "

    def __init__(self, cause: object):
        self.reason = str(cause)
        super().__init__(f"{self.prefix}{self.reason}")


class ReviewTimeoutError(ReviewSubmissionError):
    # Callers match on this exact text.
    def __init__(self):
        super().__init__(DEADLINE_EXCEEDED)


class AuthRejectedError(ReviewSubmissionError):
    """The platform refused the credential (401 or 403)."""
