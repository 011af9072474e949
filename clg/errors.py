"""Exception hierarchy for clg.

Every failure the library reports derives from GitLabError and carries a
``kind`` string so callers can report it uniformly.
"""


class GitLabError(Exception):
    """Base class for all clg errors."""

    kind = "gitlab-error"


class ConfigurationError(GitLabError):
    """Invalid or incomplete configuration."""

    kind = "configuration"


class MissingScopeError(ConfigurationError):
    """Neither a group nor a user is configured."""

    kind = "missing-scope-configuration"

    def __init__(self, message: str = "Neither GITLAB_GROUP nor GITLAB_USER is configured"):
        super().__init__(message)


class APIError(GitLabError):
    """GitLab answered with a non-2xx status."""

    kind = "unsuccessful-status"

    def __init__(self, status_code: int, url: str | None = None):
        self.status_code = status_code
        self.url = url
        target = f" for {url}" if url else ""
        super().__init__(f"unsuccessful request{target}: HTTP {status_code}")


class TransportError(GitLabError):
    """Connection, TLS or protocol failure below HTTP."""

    kind = "transport-failure"


class MalformedResponseError(GitLabError):
    """Response body does not have the expected JSON shape."""

    kind = "malformed-response-body"


class GitError(GitLabError):
    """A git command failed or the repository state is unusable."""

    kind = "git-failure"


class ProjectNotFoundError(GitLabError):
    """No listed project matches the repository remote URL."""

    kind = "project-not-found"

    def __init__(self, remote_url: str):
        self.remote_url = remote_url
        super().__init__(f"No GitLab project matches remote URL '{remote_url}'")
