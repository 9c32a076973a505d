"""
pbxdoctor.project - Locating and Resolving Xcode Projects

- locator: find the .xcodeproj bundle for a path
- graph: index the parsed object graph (kinds, child -> parent links)
- resolver: turn the graph into files, groups and targets
- project: XcodeProject, the opened and resolved project
"""

from pbxdoctor.project.errors import (
    ProjectError,
    ProjectNotFoundError,
    IncompatibleProjectError,
    CyclicHierarchyError,
)
from pbxdoctor.project.locator import (
    BUNDLE_EXTENSION,
    DESCRIPTION_FILE,
    ProjectLocation,
    find_project_location,
)
from pbxdoctor.project.graph import GraphObject, ObjectGraph, ObjectKind
from pbxdoctor.project.model import (
    BuildConfiguration,
    FileReference,
    GroupReference,
    ProductReference,
    ProjectModel,
)
from pbxdoctor.project.resolver import ProjectResolver, resolve_project
from pbxdoctor.project.project import XcodeProject

__all__ = [
    # Errors
    "ProjectError",
    "ProjectNotFoundError",
    "IncompatibleProjectError",
    "CyclicHierarchyError",
    # Locator
    "BUNDLE_EXTENSION",
    "DESCRIPTION_FILE",
    "ProjectLocation",
    "find_project_location",
    # Graph
    "GraphObject",
    "ObjectGraph",
    "ObjectKind",
    # Model
    "BuildConfiguration",
    "FileReference",
    "GroupReference",
    "ProductReference",
    "ProjectModel",
    # Resolution
    "ProjectResolver",
    "resolve_project",
    "XcodeProject",
]
