"""Ordered pattern/template rules for mapping branch names."""

import re
from collections.abc import Iterable, Iterator

from pr_tracker.shared.exceptions import RuleCompilationError


class RuleTable:
    r"""An immutable table of branch rules.

    Each rule is a regular expression and a replacement template. Rules with
    identical pattern text are merged into one entry, keeping the order their
    templates were declared in. Entries are then evaluated in order of their
    anchored pattern text (``\A<pattern>\z``), not declaration order, so when
    a branch matches several patterns the results come out sorted by pattern.
    Anchoring puts ``staging-next`` ahead of ``staging``.

    Patterns always have to match the whole branch name. Templates refer to
    capture groups with ``\1`` (or ``\g<1>``); a template without group
    references is used literally.

    Example:
        >>> table = RuleTable([(r"release-([\d.]+)", r"nixpkgs-\1-darwin")])
        >>> table.expand("release-20.09")
        ['nixpkgs-20.09-darwin']
        >>> table.expand("release-20.09-beta")
        []
    """

    def __init__(self, rules: Iterable[tuple[str, str]]) -> None:
        """Compile a rule table.

        Args:
            rules: (pattern, template) pairs in declaration order

        Raises:
            RuleCompilationError: If a pattern is not a valid regular expression
        """
        grouped: dict[str, list[str]] = {}
        for pattern, template in rules:
            grouped.setdefault(pattern, []).append(template)

        entries: list[tuple[re.Pattern[str], tuple[str, ...]]] = []
        for pattern in sorted(grouped, key=lambda p: rf"\A{p}\z"):
            try:
                compiled = re.compile(pattern)
            except re.error as e:
                raise RuleCompilationError(f"Invalid branch pattern {pattern!r}: {e}") from e
            entries.append((compiled, tuple(grouped[pattern])))

        self._entries = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def patterns(self) -> list[str]:
        """Pattern texts in evaluation order."""
        return [compiled.pattern for compiled, _ in self._entries]

    def _matches(self, branch: str) -> Iterator[tuple[re.Match[str], tuple[str, ...]]]:
        for compiled, templates in self._entries:
            match = compiled.fullmatch(branch)
            if match is not None:
                yield match, templates

    def expand(self, branch: str) -> list[str]:
        """Apply every matching rule to a branch name.

        Args:
            branch: Branch name to look up

        Returns:
            All substituted templates of every matching pattern, patterns in
            sorted order and each pattern's templates in declared order.
            Empty when nothing matches.
        """
        return [
            match.expand(template)
            for match, templates in self._matches(branch)
            for template in templates
        ]

    def first(self, branch: str) -> str | None:
        """Apply only the first matching rule to a branch name.

        Args:
            branch: Branch name to look up

        Returns:
            First template of the first matching pattern, substituted, or
            None when no pattern matches
        """
        for match, templates in self._matches(branch):
            return match.expand(templates[0])
        return None
