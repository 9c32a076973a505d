"""
Xcode File Types Registry

Maps `lastKnownFileType` / `explicitFileType` identifiers to the file
extensions they are commonly found with.

Files matching SOURCE_TYPES are considered "source files": they are
compiled or processed by a build phase, and they are the corpus the
unused-resources scan searches through. Assets (images, video) are never
listed here.
"""

import os
from typing import List, Optional, Tuple


# (kind, [extensions]) in lookup order; the first match wins when a kind
# is inferred from an extension ("h" resolves to the C header kind)
SOURCE_TYPES: List[Tuple[str, List[str]]] = [
    ("file.storyboard", ["storyboard"]),
    ("file.xib", ["xib", "nib"]),
    ("folder.assetcatalog", ["xcassets"]),
    ("text.plist.strings", ["strings"]),
    ("text.plist.xml", ["plist"]),
    ("sourcecode.c.c", ["c"]),
    ("sourcecode.c.h", ["h", "pch"]),
    ("sourcecode.c.objc", ["m"]),
    ("sourcecode.cpp.objcpp", ["mm"]),
    ("sourcecode.cpp.cpp", ["cpp", "cc"]),
    ("sourcecode.cpp.h", ["h", "hh"]),
    ("sourcecode.swift", ["swift"]),
    ("sourcecode.metal", ["metal", "mtl"]),
    ("text.script.sh", ["sh"]),
]

HEADER_EXTENSIONS = {"h", "hh", "pch"}

# Project-model data files that are bundles, never plain files
EXCLUDED_KINDS = {"wrapper.xcdatamodel"}

PROPERTY_LIST_KIND = "text.plist.xml"
PROPERTY_LIST_EXTENSION = "plist"

ASSET_CATALOG_KIND = "folder.assetcatalog"
ASSET_CATALOG_EXTENSION = "xcassets"
# Marker file present in every asset catalog item directory
ASSET_MARKER_FILE = "Contents.json"

MARKUP_KINDS = {"file.storyboard", "file.xib", "text.xml", "text.html"}
MARKUP_EXTENSIONS = {"storyboard", "xib", "xml", "html"}

CODE_KIND_PREFIX = "sourcecode"


def extension_of(path: str) -> str:
    """Return the extension of a path without the leading dot."""
    return os.path.splitext(path)[1][1:]


def infer_kind(path: str) -> Optional[str]:
    """Infer a file kind from the path's extension using SOURCE_TYPES."""
    extension = extension_of(path)
    if not extension:
        return None
    for kind, extensions in SOURCE_TYPES:
        if extension in extensions:
            return kind
    return None


def is_source_type(kind: Optional[str], extension: str) -> bool:
    """True if either the kind or the extension appears in SOURCE_TYPES."""
    for source_kind, extensions in SOURCE_TYPES:
        if kind == source_kind or extension in extensions:
            return True
    return False
