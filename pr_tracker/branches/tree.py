"""Propagation trees: where a change should go, and whether it got there."""

from pr_tracker.branches.tables import branch_hydra_link, next_branches
from pr_tracker.core.logging import get_logger
from pr_tracker.nixpkgs.repository import AncestryOracle
from pr_tracker.shared.exceptions import AncestryLookupError
from pr_tracker.shared.models import Acceptance, BranchNode, MergeStatus

logger = get_logger(__name__)


def build_tree(branch: str, found_branches: set[str] | None = None) -> BranchNode:
    """Expand a branch into the tree of branches it propagates to.

    Acceptance is left UNKNOWN on every node; see annotate().

    Args:
        branch: Root branch name
        found_branches: If given, every branch name in the tree is added to it

    Returns:
        Root node of the propagation tree
    """
    if found_branches is not None:
        found_branches.add(branch)

    children = [build_tree(next_branch, found_branches) for next_branch in next_branches(branch)]

    return BranchNode(
        name=branch,
        hydra_link=branch_hydra_link(branch),
        children=children,
    )


def collect_branch_names(tree: BranchNode) -> set[str]:
    """Every distinct branch name that appears in a tree."""
    return {node.name for node in tree.walk()}


def fill_acceptance(
    tree: BranchNode, accepted: set[str], missing_means_absent: bool
) -> BranchNode:
    """Set the acceptance of every node from a set of accepted branches.

    A branch in ``accepted`` is TRUE. Any other branch is FALSE when
    ``missing_means_absent``, and UNKNOWN otherwise.
    """
    for node in tree.walk():
        if node.name in accepted:
            node.acceptance = Acceptance.TRUE
        elif missing_means_absent:
            node.acceptance = Acceptance.FALSE
        else:
            node.acceptance = Acceptance.UNKNOWN
    return tree


async def annotate(
    tree: BranchNode, merge_status: MergeStatus, oracle: AncestryOracle
) -> BranchNode:
    """Mark every node of a tree with whether the change has reached it.

    The oracle is asked once for the whole tree. If it fails, whatever it
    managed to confirm is kept and everything else becomes UNKNOWN rather
    than FALSE.

    Args:
        tree: Tree from build_tree(), rooted at the pull request's base branch
        merge_status: Merge outcome of the pull request
        oracle: Answers which branches contain a commit

    Returns:
        The same tree, annotated in place
    """
    accepted: set[str] = set()
    missing_means_absent = True

    if merge_status.is_merged:
        if merge_status.merge_commit is not None:
            all_branches = collect_branch_names(tree)
            try:
                containing = await oracle.branches_containing_commit(
                    all_branches, merge_status.merge_commit
                )
            except AncestryLookupError as e:
                logger.warning(
                    "tree.ancestry.failed",
                    base_branch=tree.name,
                    commit=merge_status.merge_commit,
                    error=str(e),
                    partial=len(e.found),
                )
                containing = e.found
                missing_means_absent = False

            accepted = all_branches & containing
        else:
            missing_means_absent = False

        # GitHub said it merged into the base branch, so the base branch has
        # it even when the local repository can't confirm that.
        accepted.add(tree.name)

    logger.debug(
        "tree.acceptance.resolved",
        base_branch=tree.name,
        state=merge_status.state.value,
        accepted=sorted(accepted),
        missing_means_absent=missing_means_absent,
    )
    return fill_acceptance(tree, accepted, missing_means_absent)


async def make_tree(
    base_branch: str, merge_status: MergeStatus, oracle: AncestryOracle
) -> BranchNode:
    """Build and annotate the propagation tree for a pull request.

    Example:
        >>> tree = await make_tree("master", MergeStatus.open(), repository)
        >>> [child.name for child in tree.children]
        ['nixpkgs-unstable', 'nixos-unstable-small']
    """
    tree = build_tree(base_branch)
    return await annotate(tree, merge_status, oracle)
