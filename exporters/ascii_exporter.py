"""ASCII tree-style exporter for dependency graphs."""

from typing import List, Set, Tuple

from graph.model import DiscoveryResult


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def to_ascii(result: DiscoveryResult, style: str = "tree") -> str:
    """
    Convert a discovery result to ASCII tree representation.

    Each node that is never the target of a reference starts a tree. In
    outbound mode those are projects listing their packages; in inbound mode
    they are packages listing the projects that use them.

    Args:
        result: The discovery result to export.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).

    Returns:
        ASCII tree string.
    """
    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    root_nodes = sorted(result.get_roots(), key=result.label)

    # Everything sits on a cycle; fall back to nodes with outgoing edges.
    if not root_nodes:
        root_nodes = sorted((n for n in result.nodes if result.get_targets(n)), key=result.label)

    lines: List[str] = []

    for i, root_node in enumerate(root_nodes):
        _render_node(
            result=result,
            node=root_node,
            prefix="",
            is_last=True,
            chars=chars,
            visited=set(),
            lines=lines,
            is_root=True,
        )

        if i < len(root_nodes) - 1:
            lines.append("")

    return "\n".join(lines)


def _render_node(
    result: DiscoveryResult,
    node: str,
    prefix: str,
    is_last: bool,
    chars: Tuple[str, str, str, str],
    visited: Set[str],
    lines: List[str],
    is_root: bool = False,
) -> None:
    """
    Recursively render a node and its children.

    Args:
        result: The discovery result.
        node: Identity of the node to render.
        prefix: Current line prefix for indentation.
        is_last: Whether this is the last child of its parent.
        chars: Character set (branch, last, vertical, space).
        visited: Nodes on the current branch (to detect cycles).
        lines: Output lines list (modified in place).
        is_root: Whether this is a root-level node.
    """
    branch, last, vertical, space = chars

    is_cycle = node in visited
    cycle_marker = " [*]" if is_cycle else ""
    label = result.label(node)

    if is_root:
        lines.append(f"{label}{cycle_marker}")
    else:
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{label}{cycle_marker}")

    if is_cycle:
        return

    visited.add(node)

    children = sorted(result.get_targets(node), key=result.label)
    if is_root:
        new_prefix = ""
    else:
        new_prefix = prefix + (space if is_last else vertical)

    for index, child in enumerate(children):
        _render_node(
            result=result,
            node=child,
            prefix=new_prefix,
            is_last=(index == len(children) - 1),
            chars=chars,
            visited=visited,
            lines=lines,
        )

    # Allow the same node to appear again under a different branch.
    visited.discard(node)
