"""
Resolved project entities.

These are produced once by the resolver and never mutated afterwards.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from pbxdoctor.project import file_types


@dataclass(frozen=True)
class FileReference:
    """A file in the project, resolved to a filesystem path."""
    path: str                   # normalized, root-joined path
    kind: Optional[str]         # explicit type > declared type > inferred from extension
    has_target_membership: bool

    @property
    def file_name(self) -> str:
        return os.path.basename(self.path)

    @property
    def name(self) -> str:
        """File name without its extension."""
        return os.path.splitext(self.file_name)[0]

    @property
    def extension(self) -> str:
        return file_types.extension_of(self.path)

    @property
    def is_source_file(self) -> bool:
        return file_types.is_source_type(self.kind, self.extension)

    @property
    def is_header_file(self) -> bool:
        return self.extension in file_types.HEADER_EXTENSIONS

    @property
    def is_property_list(self) -> bool:
        return self.kind == file_types.PROPERTY_LIST_KIND or self.extension == file_types.PROPERTY_LIST_EXTENSION

    @property
    def is_asset_catalog(self) -> bool:
        return self.kind == file_types.ASSET_CATALOG_KIND or self.extension == file_types.ASSET_CATALOG_EXTENSION

    @property
    def is_code(self) -> bool:
        return self.kind is not None and self.kind.startswith(file_types.CODE_KIND_PREFIX)

    @property
    def is_markup(self) -> bool:
        return self.kind in file_types.MARKUP_KINDS or self.extension in file_types.MARKUP_EXTENSIONS

    @property
    def is_hidden(self) -> bool:
        return self.file_name.startswith(".")


@dataclass(frozen=True)
class GroupReference:
    """A group as shown in the project navigator."""
    path: Optional[str]         # None for virtual (non-folder) groups
    visual_path: str            # position in the navigator hierarchy, e.g. "App/Views"
    name: str
    has_children: bool


@dataclass(frozen=True)
class ProductReference:
    """A native target."""
    name: str
    builds_source_files: bool


@dataclass(frozen=True)
class BuildConfiguration:
    """Retained build settings of an XCBuildConfiguration object."""
    name: Optional[str]
    settings: Dict[str, Any] = field(default_factory=dict)

    def setting(self, key: str) -> Optional[str]:
        value = self.settings.get(key)
        return value if isinstance(value, str) else None


APP_ICON_SETTING = "ASSETCATALOG_COMPILER_APPICON_NAME"
INFO_PLIST_SETTING = "INFOPLIST_FILE"
SOURCE_ROOT_TOKENS = ("$(SRCROOT)", "${SRCROOT}", "$(PROJECT_DIR)", "${PROJECT_DIR}")


@dataclass(frozen=True)
class ProjectModel:
    """Immutable snapshot of a resolved project."""
    root: str
    files: Tuple[FileReference, ...] = ()
    groups: Tuple[GroupReference, ...] = ()
    products: Tuple[ProductReference, ...] = ()
    build_configurations: Tuple[BuildConfiguration, ...] = ()

    def references_asset_as_app_icon(self, asset_name: str) -> bool:
        """True if any build configuration names `asset_name` as the app icon."""
        return any(
            config.setting(APP_ICON_SETTING) == asset_name
            for config in self.build_configurations
        )

    def references_property_list_as_info_plist(self, file: FileReference) -> bool:
        """True if any build configuration points INFOPLIST_FILE at `file`."""
        root = os.path.normpath(self.root)
        for config in self.build_configurations:
            setting = config.setting(INFO_PLIST_SETTING)
            if not setting:
                continue
            for token in SOURCE_ROOT_TOKENS:
                setting = setting.replace(token, root)
            if file.path.endswith(os.path.normpath(setting)):
                return True
        return False
