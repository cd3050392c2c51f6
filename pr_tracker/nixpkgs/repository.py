"""Branch ancestry queries against a local nixpkgs checkout."""

import asyncio
from pathlib import Path
from typing import Protocol

from pr_tracker.core.logging import get_logger
from pr_tracker.shared.exceptions import AncestryLookupError, RepositoryError

logger = get_logger(__name__)


class AncestryOracle(Protocol):
    """Something that can tell which branches contain a commit."""

    async def branches_containing_commit(self, candidates: set[str], commit: str) -> set[str]:
        """Return the subset of ``candidates`` whose tip contains ``commit``.

        Raises:
            AncestryLookupError: If some candidates could not be checked.
                ``found`` on the error holds the branches confirmed so far.
        """
        ...


class NixpkgsRepository:
    """A git clone of nixpkgs whose remote-tracking branches answer ancestry.

    Attributes:
        path: Path to the git checkout
        remote: Name of the remote whose branches are inspected
    """

    def __init__(self, path: str | Path, remote: str = "origin") -> None:
        """Initialize repository wrapper.

        Args:
            path: Path to an existing git clone
            remote: Remote name to read branches from (default: "origin")
        """
        self.path = Path(path)
        self.remote = remote

    async def _git(self, *args: str) -> tuple[int, str, str]:
        """Run git in the checkout.

        Returns:
            Exit code, decoded stdout and decoded stderr

        Raises:
            RepositoryError: If git cannot be started
        """
        try:
            process = await asyncio.create_subprocess_exec(
                "git",
                "-C",
                str(self.path),
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RepositoryError(f"Failed to run git: {e}") from e

        stdout, stderr = await process.communicate()
        if process.returncode is None:
            raise RepositoryError(f"git {args[0]} did not report an exit status")
        return (
            process.returncode,
            stdout.decode(errors="replace"),
            stderr.decode(errors="replace").strip(),
        )

    async def fetch(self) -> None:
        """Update remote-tracking branches from the remote.

        Raises:
            RepositoryError: If the fetch fails
        """
        logger.info("nixpkgs.fetch.started", path=str(self.path), remote=self.remote)
        code, _, stderr = await self._git("fetch", "--quiet", self.remote)
        if code != 0:
            raise RepositoryError(f"git fetch {self.remote} exited with {code}: {stderr}")
        logger.info("nixpkgs.fetch.completed", remote=self.remote)

    async def branches_containing_commit(self, candidates: set[str], commit: str) -> set[str]:
        """Check which candidate branches contain a commit.

        Lists every remote-tracking branch containing the commit in one
        ``git for-each-ref --contains`` call and keeps the candidates among
        them. A candidate with no remote-tracking branch is simply not
        contained.

        Args:
            candidates: Branch names to check
            commit: Commit SHA to look for

        Returns:
            Candidates whose remote-tracking branch contains the commit

        Raises:
            AncestryLookupError: If git fails (unknown commit, broken
                checkout). No branches are confirmed in that case.
        """
        if not candidates:
            return set()

        try:
            code, stdout, stderr = await self._git(
                "for-each-ref",
                "--contains",
                commit,
                "--format=%(refname:lstrip=3)",
                f"refs/remotes/{self.remote}",
            )
        except RepositoryError as e:
            raise AncestryLookupError(str(e)) from e

        if code != 0:
            raise AncestryLookupError(
                f"git for-each-ref --contains {commit[:12]} exited with {code}: {stderr}"
            )

        found = candidates & set(stdout.splitlines())

        logger.debug(
            "nixpkgs.ancestry.checked",
            commit=commit[:12],
            candidates=len(candidates),
            found=sorted(found),
        )
        return found
