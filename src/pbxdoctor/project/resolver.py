"""
Project Model Resolver

Turns an ObjectGraph into typed FileReference / GroupReference /
ProductReference collections by replicating how Xcode anchors paths
(`sourceTree`) and infers target membership.

Malformed objects are skipped and logged at debug level, never fatal.
"""

import logging
import os
from typing import List, Optional

from pbxdoctor.project import file_types
from pbxdoctor.project.errors import CyclicHierarchyError
from pbxdoctor.project.graph import GROUP_KINDS, GraphObject, ObjectGraph, ObjectKind
from pbxdoctor.project.model import (
    BuildConfiguration,
    FileReference,
    GroupReference,
    ProductReference,
    ProjectModel,
)

logger = logging.getLogger(__name__)


# =============================================================================
# SOURCE TREES
# =============================================================================

SOURCE_ROOT = "SOURCE_ROOT"
ABSOLUTE = "<absolute>"
GROUP = "<group>"

# Locations outside the project that cannot be resolved to a real path
UNRESOLVABLE_SOURCE_TREES = {"", "SDKROOT", "DEVELOPER_DIR", "BUILT_PRODUCTS_DIR"}

# Ancestors with these origins anchor everything below them
ANCHORING_SOURCE_TREES = {SOURCE_ROOT, ABSOLUTE}


class ProjectResolver:
    """
    Single-pass resolver from object graph to ProjectModel.

    Usage:
        model = ProjectResolver(graph, root="path/to/project").resolve()
    """

    def __init__(self, graph: ObjectGraph, root: str):
        self.graph = graph
        self.root = root

    def resolve(self) -> ProjectModel:
        """Resolve every recognized object into the immutable model."""
        files = self._resolve_files()
        groups = self._resolve_groups()
        products = self._resolve_products()
        configurations = [
            BuildConfiguration(name=obj.string("name"), settings=obj.dictionary("buildSettings") or {})
            for obj in self.graph.objects_of(ObjectKind.BUILD_CONFIGURATION)
        ]

        logger.debug(
            f"Resolved {len(files)} files, {len(groups)} groups, {len(products)} targets "
            f"from {len(self.graph)} objects"
        )
        return ProjectModel(
            root=self.root,
            files=tuple(files),
            groups=tuple(groups),
            products=tuple(products),
            build_configurations=tuple(configurations),
        )

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def _anchor(self, path: str) -> str:
        """Absolute paths are used as-is; relative ones hang off the project root."""
        if os.path.isabs(path):
            return os.path.normpath(path)
        return os.path.normpath(os.path.join(self.root, path))

    def resolve_path(self, obj: GraphObject) -> Optional[str]:
        """
        Resolve the filesystem path of a file or group object.

        Returns None when the object has no path, lives in an unresolvable
        location, or sits in a cyclic hierarchy.
        """
        source_tree = obj.string("sourceTree")
        path = obj.string("path")
        if source_tree is None or path is None:
            return None

        if source_tree in UNRESOLVABLE_SOURCE_TREES:
            return None

        if source_tree in (SOURCE_ROOT, ABSOLUTE):
            return self._anchor(path)

        if source_tree != GROUP:
            logger.debug(f"Object {obj.id} has unrecognized sourceTree {source_tree!r}; skipping")
            return None

        segments = [path]
        try:
            for ancestor in self.graph.ancestors(obj.id):
                ancestor_path = ancestor.string("path")
                if ancestor_path:
                    segments.append(ancestor_path)
                # groups without a path are virtual and contribute nothing
                if ancestor.string("sourceTree") in ANCHORING_SOURCE_TREES:
                    break
        except CyclicHierarchyError as e:
            logger.debug(f"{e}; cannot resolve path of {obj.id}")
            return None

        return self._anchor("/".join(reversed(segments)))

    def resolve_visual_path(self, obj: GraphObject) -> Optional[str]:
        """Position of the object in the navigator hierarchy, by display names."""
        name = obj.display_name
        if name is None:
            return None

        segments = [name]
        try:
            for ancestor in self.graph.ancestors(obj.id):
                ancestor_name = ancestor.display_name
                if ancestor_name:
                    segments.append(ancestor_name)
        except CyclicHierarchyError as e:
            logger.debug(f"{e}; cannot resolve navigator path of {obj.id}")
            return None

        return "/".join(reversed(segments))

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    def _resolve_files(self) -> List[FileReference]:
        files = []
        for obj in self.graph.objects_of(ObjectKind.FILE_REFERENCE):
            kind = obj.string("explicitFileType") or obj.string("lastKnownFileType")
            if kind is None:
                kind = file_types.infer_kind(obj.string("path") or "")
            if kind in file_types.EXCLUDED_KINDS:
                continue

            path = self.resolve_path(obj)
            if path is None:
                continue

            try:
                is_member = self.graph.is_build_file_member(obj.id)
            except CyclicHierarchyError as e:
                logger.debug(f"{e}; skipping file {obj.id}")
                continue

            files.append(FileReference(path=path, kind=kind, has_target_membership=is_member))
        return files

    def _resolve_groups(self) -> List[GroupReference]:
        groups = []
        for obj in self.graph.objects_of(*GROUP_KINDS):
            children = obj.children
            name = obj.display_name
            if children is None or name is None:
                logger.debug(f"Group {obj.id} has no children list or name; skipping")
                continue

            visual_path = self.resolve_visual_path(obj)
            if visual_path is None:
                continue

            groups.append(GroupReference(
                path=self.resolve_path(obj),
                visual_path=visual_path,
                name=name,
                has_children=len(children) > 0,
            ))
        return groups

    def _resolve_products(self) -> List[ProductReference]:
        products = []
        for obj in self.graph.objects_of(ObjectKind.NATIVE_TARGET):
            name = obj.string("name")
            if name is None:
                logger.debug(f"Target {obj.id} has no name; skipping")
                continue

            builds_source_files = False
            for phase_id in obj.string_list("buildPhases") or []:
                phase = self.graph.get(phase_id)
                if phase is None or phase.kind != ObjectKind.SOURCES_BUILD_PHASE:
                    continue
                if phase.string_list("files"):
                    builds_source_files = True
                    break

            products.append(ProductReference(name=name, builds_source_files=builds_source_files))
        return products


def resolve_project(graph: ObjectGraph, root: str) -> ProjectModel:
    """Convenience function to resolve a graph in one call."""
    return ProjectResolver(graph, root).resolve()
