"""Error taxonomy of the background check.

Every failure the Core can surface derives from `BackgroundCheckError`, so a
front end only needs one `except` to render a message. `subject_name` is filled
in by the entry point so the caller knows which check failed.
"""

from __future__ import annotations


class BackgroundCheckError(Exception):
    """Base class for every typed failure of a check."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.subject_name: str | None = None


class NotFoundError(BackgroundCheckError):
    """The name does not resolve to any account (user-correctable)."""

    def __init__(self, name: str) -> None:
        super().__init__(f'User "{name}" not found')
        self.name = name


class ResolutionError(BackgroundCheckError):
    """The name lookup failed for a reason other than not-found or rate limiting."""

    def __init__(self, name: str, cause: BaseException) -> None:
        super().__init__(f'Failed to get user ID for "{name}": {cause}')
        self.name = name
        self.cause = cause


class RetriesExhaustedError(BackgroundCheckError):
    """The upstream kept rate-limiting past the retry budget."""

    def __init__(self, request_key: object, attempts: int) -> None:
        super().__init__(f"Failed after {attempts} attempts for URL: {request_key}")
        self.request_key = request_key
        self.attempts = attempts


class UpstreamError(BackgroundCheckError):
    """A non rate-limit failure of a remote call. Never retried."""

    def __init__(
        self,
        request_key: object,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        reason = detail or (f"HTTP {status_code}" if status_code else "request failed")
        super().__init__(f"Upstream call failed for URL: {request_key} ({reason})")
        self.request_key = request_key
        self.status_code = status_code
        self.detail = detail


class InvalidInputError(BackgroundCheckError):
    """Malformed metrics reached the evaluator (internal error)."""
