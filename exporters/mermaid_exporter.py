"""Mermaid flowchart exporter for dependency graphs."""

import re
from typing import Dict, Set

from graph.model import DiscoveryResult


def to_mermaid(
    result: DiscoveryResult,
    orientation: str = "LR",
    group_by_kind: bool = False,
) -> str:
    """
    Convert a discovery result to Mermaid flowchart syntax.

    Projects are drawn as rectangles and packages as rounded boxes.

    Args:
        result: The discovery result to export.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).
        group_by_kind: If True, put projects and packages in two subgraphs.

    Returns:
        Mermaid flowchart string.
    """
    lines = [f"flowchart {orientation}"]

    node_ids = _build_node_ids(result)

    project_lines = [
        f'{node_ids[p.id]}["{_escape(p.label)}"]' for p in result.projects
    ]
    # A project also consumed as a package is drawn once, as a project.
    project_ids = {p.id for p in result.projects}
    package_lines = [
        f'{node_ids[p.id]}("{_escape(p.label)}")'
        for p in result.packages
        if p.id not in project_ids
    ]

    if group_by_kind:
        for subgraph_id, title, node_lines in (
            ("projects", "Projects", project_lines),
            ("packages", "Packages", package_lines),
        ):
            if not node_lines:
                continue
            lines.append(f"    subgraph {subgraph_id}[{title}]")
            lines.extend(f"        {line}" for line in node_lines)
            lines.append("    end")
    else:
        lines.extend(f"    {line}" for line in project_lines + package_lines)

    if result.references:
        lines.append("")
    for source, target in result.iter_edges():
        lines.append(f"    {node_ids[source]} --> {node_ids[target]}")

    return "\n".join(lines)


def _build_node_ids(result: DiscoveryResult) -> Dict[str, str]:
    """Map every node identity to a unique Mermaid node ID."""
    node_ids: Dict[str, str] = {}
    assigned: Set[str] = set()
    for node in result.nodes:
        base = _sanitize_id(node)
        candidate = base
        suffix = 0
        while candidate in assigned:
            suffix += 1
            candidate = f"{base}_{suffix}"
        assigned.add(candidate)
        node_ids[node] = candidate
    return node_ids


def _sanitize_id(value: str) -> str:
    """
    Sanitize a string to be a valid Mermaid ID.

    Mermaid IDs can only contain letters, digits, and underscores.
    """
    sanitized = re.sub(r"[\s/\\.\-()]", "_", value)
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "", sanitized)
    if sanitized and not sanitized[0].isalpha():
        sanitized = "n_" + sanitized
    return sanitized or "unknown"


def _escape(label: str) -> str:
    return label.replace('"', "#quot;")
