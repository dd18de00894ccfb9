"""JSON exporter for dependency graphs (machine-friendly format)."""

import json

from graph.model import DiscoveryResult


def to_json(result: DiscoveryResult, indent: int = 2) -> str:
    """
    Convert a discovery result to JSON format.

    The document has "mode", "projects", "packages" and "references" keys;
    references are {"from": ..., "to": ...} pairs of node ids.

    Args:
        result: The discovery result to export.
        indent: JSON indentation level.

    Returns:
        JSON string representation of the result.
    """
    return json.dumps(result.to_dict(), indent=indent)
