"""
Resource Usage Scanner

Best-effort detection of resources that are never referenced by name in
any source file. A resource is considered used as soon as one of its name
variants turns up in a (comment-stripped) source file; anything left after
every source has been searched is reported as unused.

Both kinds of error are expected: resources loaded by computed names are
reported although used, and names that happen to collide with unrelated
strings are missed.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from pbxdoctor.diagnostics.defects import ProgressCallback
from pbxdoctor.diagnostics.patterns import search_strings, strip_matches, stripping_patterns
from pbxdoctor.project import file_types
from pbxdoctor.project.model import FileReference

logger = logging.getLogger(__name__)


SCALE_FACTORS = ("@1x", "@2x", "@3x")

# Kinds and extensions that are linked or configure the build, never loaded by name
EXCLUDED_RESOURCE_KINDS = {"wrapper.framework", "archive.ar", "text.xcconfig"}
EXCLUDED_RESOURCE_EXTENSIONS = {"framework", "a", "xcconfig"}


def removing_scale_factors(name: str) -> str:
    """Strip @1x/@2x/@3x markers from a name."""
    for factor in SCALE_FACTORS:
        name = name.replace(factor, "")
    return name


@dataclass(frozen=True)
class Resource:
    """A candidate for the unused-resources check."""
    name: str
    file_name: Optional[str] = None
    name_variants: tuple = field(init=False)

    def __post_init__(self):
        if self.file_name is None:
            # catalog items carry no scale factors in their names
            variants = [self.name]
        else:
            candidates = [
                self.name,
                self.file_name,
                removing_scale_factors(self.name),
                removing_scale_factors(self.file_name),
            ]
            variants = list(dict.fromkeys(candidates))
        object.__setattr__(self, "name_variants", tuple(variants))

    @property
    def display_name(self) -> str:
        """File name when there is one; tells plain files apart from catalog items."""
        return self.file_name or self.name


def read_text(path: str) -> str:
    """Read a text file, tolerating a BOM and falling back to latin-1."""
    with open(path, "rb") as f:
        raw = f.read()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


# =============================================================================
# CANDIDATES
# =============================================================================

def is_resource_candidate(ref: FileReference) -> bool:
    """A target member that is loaded at runtime rather than compiled or linked."""
    return (
        ref.has_target_membership
        and not ref.is_source_file
        and not ref.is_asset_catalog
        and ref.kind not in EXCLUDED_RESOURCE_KINDS
        and ref.extension not in EXCLUDED_RESOURCE_EXTENSIONS
        and not ref.is_hidden
    )


def file_resources(files: Sequence[FileReference]) -> List[Resource]:
    """Resources backed by plain files."""
    return [
        Resource(name=ref.name, file_name=ref.file_name)
        for ref in files
        if is_resource_candidate(ref)
    ]


def asset_item_paths(catalog_path: str) -> List[str]:
    """
    Directories inside an asset catalog that describe an item: any
    directory with an extension (e.g. Icon.imageset) holding a Contents.json.
    """
    items = []
    for dirpath, dirnames, _filenames in os.walk(catalog_path):
        dirnames.sort()
        for dirname in dirnames:
            item_path = os.path.join(dirpath, dirname)
            if not file_types.extension_of(dirname):
                continue
            if os.path.isfile(os.path.join(item_path, file_types.ASSET_MARKER_FILE)):
                items.append(item_path)
    return items


def asset_resources(files: Sequence[FileReference]) -> List[Resource]:
    """Resources found inside asset catalogs; names only, no file names."""
    resources = []
    for ref in files:
        if not ref.is_asset_catalog:
            continue
        for item_path in asset_item_paths(ref.path):
            name = os.path.splitext(os.path.basename(item_path))[0]
            resources.append(Resource(name=name))
    return resources


# =============================================================================
# SCANNING
# =============================================================================

class ResourceScanner:
    """
    Full-text search of source files for resource names.

    Usage:
        scanner = ResourceScanner(project)
        unused = scanner.unused_resources()
    """

    def __init__(self, project, progress: Optional[ProgressCallback] = None):
        self.project = project
        self.progress = progress

    def candidates(self) -> List[Resource]:
        """Every resource, minus those a build setting is known to use."""
        resources = file_resources(self.project.files) + asset_resources(self.project.files)
        return [
            resource for resource in resources
            if not any(
                self.project.references_asset_as_app_icon(variant)
                for variant in resource.name_variants
            )
        ]

    def source_files(self) -> List[FileReference]:
        """Source files that exist and are text, i.e. not directories."""
        return [
            ref for ref in self.project.files
            if ref.is_source_file and os.path.isfile(ref.path)
        ]

    def searchable_text(self, source: FileReference) -> Optional[str]:
        """Comment-stripped contents of a source file, or None if unreadable."""
        try:
            text = read_text(source.path)
        except OSError as e:
            logger.debug(f"Skipping unreadable source {source.path}: {e}")
            return None

        is_info_plist = source.is_property_list and self.project.references_property_list_as_info_plist(source)
        return strip_matches(text, stripping_patterns(source, is_info_plist))

    def unused_resources(self) -> List[Resource]:
        """Resources not found in any source file, in candidate order."""
        remaining = self.candidates()
        sources = self.source_files()
        total = len(sources)
        logger.debug(f"Searching {total} source files for {len(remaining)} resources")

        for n, source in enumerate(sources):
            if self.progress:
                self.progress(n + 1, total, source.file_name)
            if not remaining:
                continue

            text = self.searchable_text(source)
            if text is None:
                continue

            remaining = [
                resource for resource in remaining
                if not self._is_used_in(resource, source, text)
            ]

        if self.progress:
            self.progress(total, total, None)

        return remaining

    @staticmethod
    def _is_used_in(resource: Resource, source: FileReference, text: str) -> bool:
        for variant in resource.name_variants:
            for needle in search_strings(source, variant):
                if needle in text:
                    return True
        return False
