"""Custom exception hierarchy for PR Tracker."""


class PrTrackerError(Exception):
    """Base exception for all tracker errors."""

    pass


class ConfigError(PrTrackerError):
    """Raised when configuration validation fails."""

    pass


class RuleCompilationError(PrTrackerError):
    """Raised when a branch rule pattern cannot be compiled."""

    pass


class GitHubAPIError(PrTrackerError):
    """Raised when GitHub API requests fail."""

    pass


class PullRequestNotFoundError(GitHubAPIError):
    """Raised when GitHub has no pull request with the requested number."""

    pass


class RepositoryError(PrTrackerError):
    """Raised when the local nixpkgs checkout cannot be queried or updated."""

    pass


class AncestryLookupError(RepositoryError):
    """Raised when branch ancestry could not be determined for every candidate.

    Attributes:
        found: Branches confirmed to contain the commit before the failure
    """

    def __init__(self, message: str, found: set[str] | None = None) -> None:
        super().__init__(message)
        self.found: set[str] = set(found or ())
