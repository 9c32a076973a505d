"""
Defect rules.

Each rule collects the evidence (case strings) for one defect from a
resolved project. Rules hold no state and only read the filesystem.
"""

import logging
import os
from typing import List, Optional

from pbxdoctor.diagnostics.defects import ProgressCallback
from pbxdoctor.diagnostics.resources import ResourceScanner
from pbxdoctor.parser import PropertyListError, load_property_list_file
from pbxdoctor.project.model import FileReference, GroupReference

logger = logging.getLogger(__name__)


def nonexistent_files(project) -> List[FileReference]:
    """File references whose path does not exist."""
    return [ref for ref in project.files if not os.path.exists(ref.path)]


def nonexistent_file_paths(project) -> List[str]:
    return [ref.path for ref in nonexistent_files(project)]


def nonexistent_groups(project) -> List[GroupReference]:
    """Folder groups whose path does not exist. Virtual groups never qualify."""
    return [
        ref for ref in project.groups
        if ref.path is not None and not os.path.exists(ref.path)
    ]


def nonexistent_group_paths(project) -> List[str]:
    return [f'{ref.path}: "{ref.visual_path}"' for ref in nonexistent_groups(project)]


def empty_group_paths(project) -> List[str]:
    return [ref.visual_path for ref in project.groups if not ref.has_children]


def empty_target_names(project) -> List[str]:
    return [ref.name for ref in project.products if not ref.builds_source_files]


def dangling_file_paths(project) -> List[str]:
    """
    Source files without target membership.

    Headers are never target members. Info.plists are not either, but are
    used through the INFOPLIST_FILE build setting.
    """
    paths = []
    for ref in project.files:
        if ref.is_header_file or not ref.is_source_file or ref.has_target_membership:
            continue
        if ref.is_property_list and project.references_property_list_as_info_plist(ref):
            continue
        paths.append(ref.path)
    return paths


def corrupt_property_list_cases(project, progress: Optional[ProgressCallback] = None) -> List[str]:
    """
    Property lists that fail to deserialize, with the reason for each.

    Files that cannot be read at all are left to the nonexistent-files rule.
    """
    files = [ref for ref in project.files if ref.is_property_list]
    total = len(files)
    cases = []

    for n, ref in enumerate(files):
        if progress:
            progress(n + 1, total, ref.file_name)
        try:
            load_property_list_file(ref.path)
        except OSError as e:
            logger.debug(f"Skipping unreadable property list {ref.path}: {e}")
        except PropertyListError as e:
            cases.append(f"{ref.path}: {e.reason}")

    if progress:
        progress(total, total, None)

    return cases


def unused_resource_names(project, progress: Optional[ProgressCallback] = None) -> List[str]:
    """Resources not referenced by any source file (heuristic)."""
    scanner = ResourceScanner(project, progress=progress)
    return [resource.display_name for resource in scanner.unused_resources()]
