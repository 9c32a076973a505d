"""
Project Locator

Finds the .xcodeproj bundle for a user-supplied path. The path may be the
bundle itself, or a directory whose immediate entries contain one
(subdirectories are never searched).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from pbxdoctor.project.errors import IncompatibleProjectError, ProjectNotFoundError


BUNDLE_EXTENSION = ".xcodeproj"
DESCRIPTION_FILE = "project.pbxproj"

NOT_A_PROJECT = "not an Xcode project"
UNSUPPORTED_FORMAT = "unsupported Xcode project format"


@dataclass(frozen=True)
class ProjectLocation:
    """Where a project lives on disk."""
    root: Path          # directory containing the bundle
    bundle: Path        # path to the .xcodeproj
    description: Path   # path to .xcodeproj/project.pbxproj


def _is_syntactic_directory(path: str) -> bool:
    separators = {os.sep, "/"}
    if os.altsep:
        separators.add(os.altsep)
    return path.endswith(tuple(separators))


def find_project_location(path: Union[str, os.PathLike]) -> ProjectLocation:
    """
    Locate a project bundle from a file or directory path.

    Raises:
        ProjectNotFoundError: the path, or a bundle within it, does not exist
        IncompatibleProjectError: the path is not a bundle or directory, or the
            bundle has no description file
    """
    raw = os.fspath(path)
    candidate = Path(os.path.expanduser(raw))

    if not candidate.exists():
        raise ProjectNotFoundError(searched_directory=_is_syntactic_directory(raw))

    if candidate.suffix == BUNDLE_EXTENSION:
        bundle = candidate
    elif not candidate.is_dir():
        raise IncompatibleProjectError(NOT_A_PROJECT)
    else:
        entries = sorted(os.listdir(candidate))
        match = next((entry for entry in entries if entry.endswith(BUNDLE_EXTENSION)), None)
        if match is None:
            raise ProjectNotFoundError(searched_directory=True)
        bundle = candidate / match

    description = bundle / DESCRIPTION_FILE
    if not description.is_file():
        raise IncompatibleProjectError(UNSUPPORTED_FORMAT)

    # for example, ~/Development/My/Project.xcodeproj -> ~/Development/My
    return ProjectLocation(root=bundle.parent, bundle=bundle, description=description)
