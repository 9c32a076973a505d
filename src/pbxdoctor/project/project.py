"""
XcodeProject - the opened, resolved project.
"""

import logging
import os
from typing import Tuple, Union

from pbxdoctor.parser import LexerError, ParseError, parse_file
from pbxdoctor.project.errors import IncompatibleProjectError
from pbxdoctor.project.graph import ObjectGraph
from pbxdoctor.project.locator import UNSUPPORTED_FORMAT, ProjectLocation, find_project_location
from pbxdoctor.project.model import (
    FileReference,
    GroupReference,
    ProductReference,
    ProjectModel,
)
from pbxdoctor.project.resolver import resolve_project

logger = logging.getLogger(__name__)


class XcodeProject:
    """
    A located, parsed and resolved Xcode project.

    The model is resolved once when the project is opened and is read-only
    afterwards, so a project can be examined any number of times.

    Usage:
        project = XcodeProject.open("path/to/App.xcodeproj")
        for file in project.files:
            print(file.path)
    """

    def __init__(self, location: ProjectLocation, model: ProjectModel):
        self.location = location
        self.model = model

    @classmethod
    def open(cls, path: Union[str, os.PathLike]) -> "XcodeProject":
        """
        Locate and read an Xcode project.

        If `path` is a directory, its immediate entries are searched for an
        .xcodeproj bundle.

        Raises:
            ProjectNotFoundError: nothing to open at `path`
            IncompatibleProjectError: `path` is not a readable Xcode project
        """
        location = find_project_location(path)
        logger.info(f"Opening {location.bundle}")

        try:
            tree = parse_file(str(location.description))
        except (LexerError, ParseError) as e:
            logger.debug(f"Cannot parse {location.description}: {e}")
            raise IncompatibleProjectError(UNSUPPORTED_FORMAT) from e
        except OSError as e:
            logger.debug(f"Cannot read {location.description}: {e}")
            raise IncompatibleProjectError(UNSUPPORTED_FORMAT) from e

        graph = ObjectGraph(tree)
        model = resolve_project(graph, str(location.root))
        return cls(location, model)

    @property
    def root(self) -> str:
        return self.model.root

    @property
    def files(self) -> Tuple[FileReference, ...]:
        return self.model.files

    @property
    def groups(self) -> Tuple[GroupReference, ...]:
        return self.model.groups

    @property
    def products(self) -> Tuple[ProductReference, ...]:
        return self.model.products

    def references_asset_as_app_icon(self, asset_name: str) -> bool:
        return self.model.references_asset_as_app_icon(asset_name)

    def references_property_list_as_info_plist(self, file: FileReference) -> bool:
        return self.model.references_property_list_as_info_plist(file)

    def __repr__(self):
        return (
            f"XcodeProject({str(self.location.bundle)!r}, {len(self.files)} files, "
            f"{len(self.groups)} groups, {len(self.products)} targets)"
        )
