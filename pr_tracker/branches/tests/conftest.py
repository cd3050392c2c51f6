"""Shared fixtures for branch tree tests."""

import pytest

from pr_tracker.shared.exceptions import AncestryLookupError


class FakeOracle:
    """Ancestry oracle answering from a fixed set of branches.

    Records every call so tests can check the lookup was batched.
    """

    def __init__(self, containing: set[str], error: str | None = None) -> None:
        self.containing = containing
        self.error = error
        self.calls: list[tuple[set[str], str]] = []

    async def branches_containing_commit(self, candidates: set[str], commit: str) -> set[str]:
        self.calls.append((set(candidates), commit))
        found = candidates & self.containing
        if self.error is not None:
            raise AncestryLookupError(self.error, found=found)
        return found


@pytest.fixture
def make_oracle() -> type[FakeOracle]:
    """Factory for fake ancestry oracles."""
    return FakeOracle
