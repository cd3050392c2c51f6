"""Data models for PR Tracker."""

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Acceptance(str, Enum):
    """Whether a change has reached a branch.

    UNKNOWN is a real answer, not a missing one: it is reported when the
    tracker knows the change merged but cannot tell which downstream
    branches contain it.
    """

    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"


class MergeState(str, Enum):
    """Pull request state as reported by GitHub."""

    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"


class MergeStatus(BaseModel):
    """Merge outcome of a pull request.

    Attributes:
        state: Open, closed (unmerged) or merged
        merge_commit: SHA of the merge commit, when merged and known
    """

    state: MergeState = Field(..., description="Pull request state")
    merge_commit: str | None = Field(None, description="Merge commit SHA")

    @classmethod
    def open(cls) -> "MergeStatus":
        return cls(state=MergeState.OPEN)

    @classmethod
    def closed(cls) -> "MergeStatus":
        return cls(state=MergeState.CLOSED)

    @classmethod
    def merged(cls, merge_commit: str | None = None) -> "MergeStatus":
        return cls(state=MergeState.MERGED, merge_commit=merge_commit)

    @property
    def is_merged(self) -> bool:
        """True when the pull request was merged into its base branch."""
        return self.state is MergeState.MERGED


class BranchNode(BaseModel):
    """One branch in a propagation tree.

    Each node is owned by the tree that contains it. The same branch name
    can appear in several places when different paths reach it.

    Attributes:
        name: Branch name
        acceptance: Whether the tracked change has reached this branch
        hydra_link: URL of the branch's Hydra status page, if it has one
        children: Branches this branch feeds into, in rule order
    """

    name: str = Field(..., description="Branch name")
    acceptance: Acceptance = Field(Acceptance.UNKNOWN, description="Tri-state acceptance")
    hydra_link: str | None = Field(None, description="Hydra status page URL")
    children: list["BranchNode"] = Field(default_factory=list, description="Downstream branches")

    def walk(self) -> Iterator["BranchNode"]:
        """Yield this node and all descendants, depth-first pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


class PullRequest(BaseModel):
    """The parts of a GitHub pull request the tracker needs.

    Attributes:
        number: Pull request number
        title: Pull request title
        base_branch: Branch the pull request targets
        status: Merge outcome
    """

    number: int = Field(..., description="Pull request number")
    title: str = Field(..., description="Pull request title")
    base_branch: str = Field(..., description="Target branch")
    status: MergeStatus = Field(..., description="Merge outcome")

    @classmethod
    def from_github_payload(cls, data: dict[str, Any]) -> "PullRequest":
        """Parse a GitHub REST pull request response.

        Args:
            data: JSON body of GET /repos/{owner}/{repo}/pulls/{number}

        Returns:
            PullRequest with its merge status resolved

        Example:
            >>> PullRequest.from_github_payload({
            ...     "number": 1, "title": "hello", "state": "closed",
            ...     "merged": True, "merge_commit_sha": "abc123",
            ...     "base": {"ref": "master"},
            ... }).status.merge_commit
            'abc123'
        """
        if data.get("merged"):
            status = MergeStatus.merged(data.get("merge_commit_sha"))
        elif data.get("state") == "closed":
            status = MergeStatus.closed()
        else:
            status = MergeStatus.open()

        return cls(
            number=data["number"],
            title=data.get("title", ""),
            base_branch=data["base"]["ref"],
            status=status,
        )
