"""Graph builder that orchestrates directory walking and graph construction."""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from graph.model import DependencyGraph, DiscoveryMode, DiscoveryResult, Package, Project, Reference
from .discovery import iter_directories
from .filters import NamespaceFilter
from .manifest import ResolvedManifest, load_manifest


logger = logging.getLogger(__name__)

ManifestLoader = Callable[[Path], Optional[ResolvedManifest]]


def build_graph(
    root: Path,
    recurse: bool = True,
    mode: DiscoveryMode = DiscoveryMode.OUTBOUND,
    project_filter: Optional[NamespaceFilter] = None,
    package_filter: Optional[NamespaceFilter] = None,
    loader: ManifestLoader = load_manifest,
    exclude_dirs: Optional[Iterable[str]] = None,
    max_depth: Optional[int] = None,
) -> DependencyGraph:
    """
    Walk a source tree and build a dependency graph.

    Args:
        root: Directory to start from.
        recurse: If False, only root itself is inspected.
        mode: OUTBOUND records project -> package edges for package
              libraries only. INBOUND records package -> project edges for
              every resolved library.
        project_filter: Filter applied to project names (default: all pass
                        except empty names).
        package_filter: Filter applied to library names (default: all pass).
        loader: Returns the resolved manifest of a directory, or None.
        exclude_dirs: Directory names not to descend into.
        max_depth: Maximum directory depth to walk.

    Returns:
        DependencyGraph holding every discovered node and edge.

    Raises:
        ManifestError: If any manifest is malformed. The run is aborted.
    """
    if project_filter is None:
        project_filter = NamespaceFilter.for_projects()
    if package_filter is None:
        package_filter = NamespaceFilter.for_packages()

    graph = DependencyGraph(mode)

    for directory in iter_directories(
        root,
        recurse=recurse,
        exclude_dirs=exclude_dirs,
        max_depth=max_depth,
    ):
        manifest = loader(directory)
        if manifest is None:
            continue

        if not project_filter.includes(manifest.name):
            logger.debug("Project %r in %s rejected by filter", manifest.name, directory)
            continue

        project = Project(name=manifest.name, version=manifest.version)
        graph.add_project_if_absent(project)
        logger.debug("Found project %s in %s", project.id, directory)

        if mode is DiscoveryMode.INBOUND:
            _add_inbound_references(graph, project, manifest, package_filter)
        else:
            _add_outbound_references(graph, project, manifest, package_filter)

    logger.info(
        "Discovered %d projects, %d packages, %d references under %s",
        len(graph.projects),
        len(graph.packages),
        len(graph.references),
        root,
    )
    return graph


def _add_outbound_references(
    graph: DependencyGraph,
    project: Project,
    manifest: ResolvedManifest,
    package_filter: NamespaceFilter,
) -> None:
    # Project-to-project references are not packages in this direction.
    for library in manifest.packages:
        if not package_filter.includes(library.name):
            continue
        package = Package.outbound(library.name, library.version)
        graph.add_package_if_absent(package)
        graph.add_reference_if_absent(Reference(source=project.id, target=package.id))


def _add_inbound_references(
    graph: DependencyGraph,
    project: Project,
    manifest: ResolvedManifest,
    package_filter: NamespaceFilter,
) -> None:
    # Every resolved library counts, whatever its type.
    for library in manifest.libraries:
        if not package_filter.includes(library.name):
            continue
        package = Package.inbound(library.name, library.version)
        graph.add_package_if_absent(package)
        graph.add_reference_if_absent(Reference(source=package.id, target=project.id))


def discover(
    root: Path,
    recurse: bool = True,
    mode: DiscoveryMode = DiscoveryMode.OUTBOUND,
    project_filter: Optional[NamespaceFilter] = None,
    package_filter: Optional[NamespaceFilter] = None,
    loader: ManifestLoader = load_manifest,
    exclude_dirs: Optional[Iterable[str]] = None,
    max_depth: Optional[int] = None,
) -> DiscoveryResult:
    """Run a discovery and return its frozen result. See build_graph."""
    graph = build_graph(
        root,
        recurse=recurse,
        mode=mode,
        project_filter=project_filter,
        package_filter=package_filter,
        loader=loader,
        exclude_dirs=exclude_dirs,
        max_depth=max_depth,
    )
    return graph.result()
