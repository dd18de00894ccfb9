"""Graph data model for storing project and package dependency relationships."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Set, Tuple


class DiscoveryMode(Enum):
    """Direction in which references are recorded."""

    OUTBOUND = "outbound"  # what a project depends on
    INBOUND = "inbound"  # what depends on a package


@dataclass(frozen=True)
class Project:
    """A discovered buildable project unit."""

    name: str
    version: str

    @property
    def id(self) -> str:
        return f"{self.name} {self.version}"

    @property
    def label(self) -> str:
        return self.id


@dataclass(frozen=True)
class Package:
    """
    A library referenced by a project.

    The identity format depends on the discovery mode, so packages from an
    inbound run never collide with packages from an outbound run.
    """

    name: str
    version: str
    id: str

    @classmethod
    def outbound(cls, name: str, version: str) -> "Package":
        return cls(name=name, version=version, id=f"{name} {version}")

    @classmethod
    def inbound(cls, name: str, version: str) -> "Package":
        return cls(name=name, version=version, id=f"{name} (package) {version}")

    @property
    def label(self) -> str:
        return f"{self.name} {self.version}"


@dataclass(frozen=True)
class Reference:
    """A directed edge between two node identities."""

    source: str
    target: str


@dataclass(frozen=True)
class DiscoveryResult:
    """
    Immutable outcome of one discovery run.

    All three sequences are deduplicated and keep first-seen order.
    """

    projects: Tuple[Project, ...] = ()
    packages: Tuple[Package, ...] = ()
    references: Tuple[Reference, ...] = ()
    mode: DiscoveryMode = DiscoveryMode.OUTBOUND

    @property
    def nodes(self) -> List[str]:
        """Return distinct node identities, projects first."""
        ids = [p.id for p in self.projects] + [p.id for p in self.packages]
        return list(dict.fromkeys(ids))

    def is_project(self, node_id: str) -> bool:
        return any(p.id == node_id for p in self.projects)

    def label(self, node_id: str) -> str:
        """Get the display label for a node identity."""
        for project in self.projects:
            if project.id == node_id:
                return project.label
        for package in self.packages:
            if package.id == node_id:
                return package.label
        return node_id

    def get_targets(self, source: str) -> List[str]:
        """Get all nodes the source node points at, in insertion order."""
        return [r.target for r in self.references if r.source == source]

    def get_sources(self, target: str) -> List[str]:
        """Get all nodes pointing at the target node, in insertion order."""
        return [r.source for r in self.references if r.target == target]

    def get_roots(self) -> List[str]:
        """
        Get nodes that are never the target of a reference.

        In outbound mode these are the projects; in inbound mode, the
        packages.
        """
        targets: Set[str] = {r.target for r in self.references}
        return [node for node in self.nodes if node not in targets]

    def iter_edges(self) -> Iterator[Tuple[str, str]]:
        """Iterate over all edges as (source, target) tuples."""
        for reference in self.references:
            yield reference.source, reference.target

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "projects": [
                {"id": p.id, "name": p.name, "version": p.version}
                for p in self.projects
            ],
            "packages": [
                {"id": p.id, "name": p.name, "version": p.version}
                for p in self.packages
            ],
            "references": [
                {"from": r.source, "to": r.target} for r in self.references
            ],
        }

    def __len__(self) -> int:
        """Return the number of distinct node identities."""
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __repr__(self) -> str:
        return (
            f"DiscoveryResult(mode={self.mode.value}, projects={len(self.projects)}, "
            f"packages={len(self.packages)}, references={len(self.references)})"
        )


class DependencyGraph:
    """
    Accumulator for one discovery run.

    Nodes and edges are keyed by identity, so insertion is idempotent and
    membership checks are O(1). Dicts keep first-seen order.
    """

    def __init__(self, mode: DiscoveryMode = DiscoveryMode.OUTBOUND):
        self.mode = mode
        self._projects: Dict[str, Project] = {}
        self._packages: Dict[str, Package] = {}
        self._references: Dict[Tuple[str, str], Reference] = {}

    @property
    def projects(self) -> List[Project]:
        return list(self._projects.values())

    @property
    def packages(self) -> List[Package]:
        return list(self._packages.values())

    @property
    def references(self) -> List[Reference]:
        return list(self._references.values())

    def add_project_if_absent(self, project: Project) -> bool:
        """Add a project unless one with the same identity exists."""
        if project.id in self._projects:
            return False
        self._projects[project.id] = project
        return True

    def add_package_if_absent(self, package: Package) -> bool:
        """Add a package unless one with the same identity exists."""
        if package.id in self._packages:
            return False
        self._packages[package.id] = package
        return True

    def add_reference_if_absent(self, reference: Reference) -> bool:
        """Add an edge unless the same (source, target) pair exists."""
        key = (reference.source, reference.target)
        if key in self._references:
            return False
        self._references[key] = reference
        return True

    def result(self) -> DiscoveryResult:
        """Snapshot the accumulated state as an immutable result."""
        return DiscoveryResult(
            projects=tuple(self._projects.values()),
            packages=tuple(self._packages.values()),
            references=tuple(self._references.values()),
            mode=self.mode,
        )

    def __len__(self) -> int:
        return len(self._projects.keys() | self._packages.keys())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._projects or node_id in self._packages

    def __repr__(self) -> str:
        return (
            f"DependencyGraph(mode={self.mode.value}, projects={len(self._projects)}, "
            f"packages={len(self._packages)}, references={len(self._references)})"
        )
