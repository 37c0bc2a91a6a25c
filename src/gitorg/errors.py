"""Error types raised by gitorg."""

from __future__ import annotations


class GitorgError(Exception):
    """Base class for every error gitorg reports to the user."""


class NotAuthenticated(GitorgError):
    def __init__(self) -> None:
        super().__init__("Not authenticated. Run `gitorg auth` first.")


class ConfigError(GitorgError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Configuration error: {message}")


class RemoteAPIError(GitorgError):
    """Any failure talking to GitHub: auth rejection, 404, network errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"GitHub API error: {message}")


class RateLimited(RemoteAPIError):
    def __init__(self, reset: str) -> None:
        self.reset = reset
        GitorgError.__init__(
            self, f"Rate limited. Resets at {reset}. Please wait and retry."
        )
        self.message = str(self)


class OrgNotFound(GitorgError):
    def __init__(self, org: str) -> None:
        self.org = org
        super().__init__(f"Organization not found: {org}")
