"""Nixpkgs release pipeline: which branch feeds which, and where Hydra builds it.

The tables are compiled once at import. A bad pattern here fails the
process at startup with RuleCompilationError.

The propagation table must stay acyclic; tree building follows it without
checking.
"""

from pr_tracker.branches.rules import RuleTable

HYDRA_BASE_URL = "https://hydra.nixos.org"

NEXT_BRANCH_RULES: list[tuple[str, str]] = [
    (r"staging", "staging-next"),
    (r"staging-next", "master"),
    (r"staging-next-([\d.]+)", r"release-\1"),
    (r"haskell-updates", "master"),
    (r"master", "nixpkgs-unstable"),
    (r"master", "nixos-unstable-small"),
    (r"nixos-(.*)-small", r"nixos-\1"),
    (r"release-([\d.]+)", r"nixpkgs-\1-darwin"),
    (r"release-([\d.]+)", r"nixos-\1-small"),
    # Up to 20.09 stable staging merged straight into the release branch
    (r"staging-((1.|20)\.\d{2})", r"release-\1"),
    (r"staging-((2[1-9]|[3-90].)\.\d{2})", r"staging-next-\1"),
]

# Branches with a Hydra jobset of their own
HYDRA_JOBSET_RULES: list[tuple[str, str]] = [
    (r"master", "nixpkgs/trunk"),
    (r"staging-next", "nixpkgs/staging-next"),
    (r"staging-next-([\d.]+)", r"nixpkgs/staging-next-\1"),
    (r"haskell-updates", "nixpkgs/haskell-updates"),
    (r"release-([\d.]+)", r"nixos/release-\1"),
]

# Channel branches, advanced by a single Hydra job
HYDRA_CHANNEL_JOB_RULES: list[tuple[str, str]] = [
    (r"nixpkgs-unstable", "nixpkgs/trunk/unstable"),
    (r"nixos-unstable-small", "nixos/unstable-small/tested"),
    (r"nixos-unstable", "nixos/trunk-combined/tested"),
    (r"nixos-(\d.*)", r"nixos/release-\1/tested"),
    (r"nixpkgs-([\d.]+)-darwin", r"nixpkgs/nixpkgs-\1-darwin/darwin-tested"),
]


def _hydra_link_rules() -> list[tuple[str, str]]:
    jobsets = [
        (pattern, f"{HYDRA_BASE_URL}/jobset/{path}#tabs-jobs")
        for pattern, path in HYDRA_JOBSET_RULES
    ]
    jobs = [
        (pattern, f"{HYDRA_BASE_URL}/job/{path}#tabs-constituents")
        for pattern, path in HYDRA_CHANNEL_JOB_RULES
    ]
    return jobsets + jobs


NEXT_BRANCHES = RuleTable(NEXT_BRANCH_RULES)
HYDRA_LINKS = RuleTable(_hydra_link_rules())


def next_branches(branch: str) -> list[str]:
    """Branches a change to ``branch`` is expected to flow into next.

    Example:
        >>> next_branches("master")
        ['nixpkgs-unstable', 'nixos-unstable-small']
    """
    return NEXT_BRANCHES.expand(branch)


def branch_hydra_link(branch: str) -> str | None:
    """Hydra page that gates ``branch``, if there is one.

    Example:
        >>> branch_hydra_link("nixos-unstable")
        'https://hydra.nixos.org/job/nixos/trunk-combined/tested#tabs-constituents'
    """
    return HYDRA_LINKS.first(branch)
