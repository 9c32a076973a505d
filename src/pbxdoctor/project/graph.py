"""
Object Graph Index

Wraps the "objects" dictionary of a parsed project.pbxproj. Every entry is
classified by its `isa` tag into an ObjectKind, and a child -> parent index
is built once up front so that ancestor walks are dictionary lookups rather
than scans over the whole object list.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set

from pbxdoctor.project.errors import CyclicHierarchyError, IncompatibleProjectError
from pbxdoctor.project.locator import UNSUPPORTED_FORMAT

logger = logging.getLogger(__name__)


class ObjectKind(Enum):
    """Recognized `isa` tags."""

    FILE_REFERENCE = "PBXFileReference"
    GROUP = "PBXGroup"
    VARIANT_GROUP = "PBXVariantGroup"
    # Versioned bundles such as .xcdatamodeld
    VERSION_GROUP = "XCVersionGroup"
    NATIVE_TARGET = "PBXNativeTarget"
    BUILD_FILE = "PBXBuildFile"
    SOURCES_BUILD_PHASE = "PBXSourcesBuildPhase"
    BUILD_CONFIGURATION = "XCBuildConfiguration"

    # Anything else; carried for completeness, never resolved
    UNKNOWN = "?"

    @classmethod
    def from_isa(cls, isa: Any) -> "ObjectKind":
        """Classify an `isa` value, falling back to UNKNOWN."""
        if isinstance(isa, str):
            for kind in cls:
                if kind.value == isa:
                    return kind
        return cls.UNKNOWN


GROUP_KINDS = (ObjectKind.GROUP, ObjectKind.VARIANT_GROUP)


@dataclass
class GraphObject:
    """A single entry of the object graph: an id and its property bag."""
    id: str
    kind: ObjectKind
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def isa(self) -> Optional[str]:
        isa = self.properties.get("isa")
        return isa if isinstance(isa, str) else None

    def string(self, key: str) -> Optional[str]:
        """Return a property if it is a string, else None."""
        value = self.properties.get(key)
        return value if isinstance(value, str) else None

    def string_list(self, key: str) -> Optional[List[str]]:
        """Return a property if it is a list, keeping only its string items."""
        value = self.properties.get(key)
        if not isinstance(value, list):
            return None
        return [item for item in value if isinstance(item, str)]

    def dictionary(self, key: str) -> Optional[Dict[str, Any]]:
        """Return a property if it is a dictionary, else None."""
        value = self.properties.get(key)
        return value if isinstance(value, dict) else None

    @property
    def children(self) -> Optional[List[str]]:
        return self.string_list("children")

    @property
    def display_name(self) -> Optional[str]:
        """Declared name, else declared path."""
        return self.string("name") or self.string("path")


class ObjectGraph:
    """
    Indexed view over a project's object graph.

    Usage:
        graph = ObjectGraph(parse_file("App.xcodeproj/project.pbxproj"))
        for group in graph.objects_of(*GROUP_KINDS):
            parent = graph.parent(group.id)
    """

    def __init__(self, tree: Any):
        if not isinstance(tree, dict) or not isinstance(tree.get("objects"), dict):
            raise IncompatibleProjectError(UNSUPPORTED_FORMAT)

        self.objects: List[GraphObject] = []
        self._by_id: Dict[str, GraphObject] = {}
        self._parents: Dict[str, str] = {}

        for object_id, properties in tree["objects"].items():
            if not isinstance(properties, dict):
                logger.debug(f"Object {object_id} is not a dictionary; keeping it as unknown")
                properties = {}
            obj = GraphObject(
                id=object_id,
                kind=ObjectKind.from_isa(properties.get("isa")),
                properties=properties,
            )
            self.objects.append(obj)
            self._by_id[object_id] = obj

        # child -> parent; the first object (in document order) listing a child wins
        for obj in self.objects:
            children = obj.children
            if children is None:
                continue
            for child_id in children:
                self._parents.setdefault(child_id, obj.id)

        self.build_file_refs: Set[str] = set()
        for build_file in self.objects_of(ObjectKind.BUILD_FILE):
            file_ref = build_file.string("fileRef")
            if file_ref is None:
                logger.debug(f"Build file {build_file.id} has no fileRef; skipping")
                continue
            self.build_file_refs.add(file_ref)

    def __len__(self) -> int:
        return len(self.objects)

    def get(self, object_id: str) -> Optional[GraphObject]:
        """Look up an object by id; None for dangling references."""
        return self._by_id.get(object_id)

    def objects_of(self, *kinds: ObjectKind) -> List[GraphObject]:
        """All objects of the given kinds, in document order."""
        return [obj for obj in self.objects if obj.kind in kinds]

    def parent(self, object_id: str) -> Optional[GraphObject]:
        """The object listing `object_id` among its children, if any."""
        parent_id = self._parents.get(object_id)
        if parent_id is None:
            return None
        return self._by_id.get(parent_id)

    def ancestors(self, object_id: str) -> Iterator[GraphObject]:
        """
        Walk up the hierarchy from an object, nearest ancestor first.

        Raises:
            CyclicHierarchyError: if the walk revisits an id
        """
        visited = {object_id}
        current = self.parent(object_id)
        while current is not None:
            if current.id in visited:
                raise CyclicHierarchyError(current.id)
            visited.add(current.id)
            yield current
            current = self.parent(current.id)

    def is_build_file_member(self, object_id: str) -> bool:
        """
        True if the object, or any of its ancestors, is referenced by a
        build file. Folder references and variant groups included in a
        build phase implicitly include their descendants.
        """
        if object_id in self.build_file_refs:
            return True
        return any(ancestor.id in self.build_file_refs for ancestor in self.ancestors(object_id))
