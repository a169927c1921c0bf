"""Custom exceptions for the GitLab client."""

from __future__ import annotations


class GitLabError(Exception):
    """Base exception for GitLab client errors."""


class ConfigurationError(GitLabError):
    """Client used before an API URL and token were configured."""


class GitLabRequestError(GitLabError):
    """A request to the GitLab API failed.

    ``status_code`` is None when no HTTP error status was received, e.g. on a
    transport failure or a body that could not be read.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidTokenError(GitLabRequestError):
    """The access token was rejected (HTTP 401)."""


class GroupAccessDeniedError(GitLabRequestError):
    """The token may not read the group (HTTP 403)."""


class GroupNotFoundError(GitLabRequestError):
    """The group does not exist (HTTP 404)."""


def describe_connection_error(exc: Exception) -> str:
    """Build a user-facing message for a failed connection check."""
    if isinstance(exc, InvalidTokenError):
        return "Invalid access token. Check the token and its scopes."
    if isinstance(exc, GroupNotFoundError):
        return "Group not found. Check the root group ID."
    if isinstance(exc, GroupAccessDeniedError):
        return "Access to the group is forbidden for this token."
    if isinstance(exc, ConfigurationError):
        return "GitLab connection is not configured."
    return f"Connection failed: {exc}"
