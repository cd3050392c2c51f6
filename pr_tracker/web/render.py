"""Plain-text and JSON views of a propagation tree."""

from typing import Any

from pr_tracker.shared.models import Acceptance, BranchNode

ACCEPTANCE_MARKS = {
    Acceptance.TRUE: "✔",
    Acceptance.FALSE: "✘",
    Acceptance.UNKNOWN: "?",
}


def render_text(tree: BranchNode, indent: str = "  ") -> str:
    """Render a tree one branch per line, children indented under parents.

    Example:
        >>> print(render_text(tree))
        ✔ staging-18.03
          ✘ release-18.03 (https://hydra.nixos.org/jobset/nixos/release-18.03#tabs-jobs)
    """
    lines: list[str] = []

    def visit(node: BranchNode, depth: int) -> None:
        line = f"{indent * depth}{ACCEPTANCE_MARKS[node.acceptance]} {node.name}"
        if node.hydra_link:
            line += f" ({node.hydra_link})"
        lines.append(line)
        for child in node.children:
            visit(child, depth + 1)

    visit(tree, 0)
    return "\n".join(lines) + "\n"


def tree_to_dict(tree: BranchNode) -> dict[str, Any]:
    """JSON-ready form of a tree."""
    return tree.model_dump(mode="json")
