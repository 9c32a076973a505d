"""
Tests for resolving the object graph into files, groups and targets.
"""

import os

import pytest
from pbxdoctor.project import ObjectGraph, resolve_project
from pbxdoctor.project.model import FileReference


def resolve(objects, root="/work"):
    return resolve_project(ObjectGraph({"objects": objects}), root)


class TestFilePaths:
    """Test sourceTree anchoring of file references."""

    def test_group_relative_chain(self):
        """Ancestor paths are joined; virtual groups contribute nothing."""
        model = resolve({
            "MAIN": {"isa": "PBXGroup", "children": ["APP"], "sourceTree": "<group>"},
            "APP": {"isa": "PBXGroup", "children": ["VIRTUAL"], "path": "App", "sourceTree": "<group>"},
            "VIRTUAL": {"isa": "PBXGroup", "children": ["F"], "name": "Views", "sourceTree": "<group>"},
            "F": {"isa": "PBXFileReference", "path": "View.swift", "sourceTree": "<group>"},
        })
        assert [f.path for f in model.files] == [os.path.normpath("/work/App/View.swift")]

    def test_source_root(self):
        model = resolve({
            "G": {"isa": "PBXGroup", "children": ["F"], "path": "Ignored", "sourceTree": "<group>"},
            "F": {"isa": "PBXFileReference", "path": "Config/App.plist", "sourceTree": "SOURCE_ROOT"},
        })
        assert model.files[0].path == os.path.normpath("/work/Config/App.plist")

    def test_absolute(self):
        model = resolve({
            "F": {"isa": "PBXFileReference", "path": "/opt/shared/Logo.png", "sourceTree": "<absolute>"},
        })
        assert model.files[0].path == os.path.normpath("/opt/shared/Logo.png")

    def test_stops_at_source_root_ancestor(self):
        """A source-root-relative ancestor ends the walk, inclusively."""
        model = resolve({
            "OUTER": {"isa": "PBXGroup", "children": ["ANCHOR"], "path": "Outer", "sourceTree": "<group>"},
            "ANCHOR": {"isa": "PBXGroup", "children": ["F"], "path": "Vendor", "sourceTree": "SOURCE_ROOT"},
            "F": {"isa": "PBXFileReference", "path": "lib.c", "sourceTree": "<group>"},
        })
        assert model.files[0].path == os.path.normpath("/work/Vendor/lib.c")

    def test_absolute_ancestor_path(self):
        model = resolve({
            "EXT": {"isa": "PBXGroup", "children": ["F"], "path": "/opt/ext", "sourceTree": "<absolute>"},
            "F": {"isa": "PBXFileReference", "path": "ext.h", "sourceTree": "<group>"},
        })
        assert model.files[0].path == os.path.normpath("/opt/ext/ext.h")

    @pytest.mark.parametrize("source_tree", ["", "SDKROOT", "DEVELOPER_DIR", "BUILT_PRODUCTS_DIR", "CUSTOM"])
    def test_unresolvable_skipped(self, source_tree):
        model = resolve({
            "F": {"isa": "PBXFileReference", "path": "UIKit.framework", "sourceTree": source_tree},
        })
        assert model.files == ()

    def test_missing_properties_skipped(self):
        model = resolve({
            "NOPATH": {"isa": "PBXFileReference", "sourceTree": "<group>"},
            "NOTREE": {"isa": "PBXFileReference", "path": "a.swift"},
        })
        assert model.files == ()

    def test_cyclic_hierarchy_skipped(self):
        """Files inside a group cycle are skipped; others still resolve."""
        model = resolve({
            "A": {"isa": "PBXGroup", "children": ["B", "F"], "path": "a", "sourceTree": "<group>"},
            "B": {"isa": "PBXGroup", "children": ["A"], "path": "b", "sourceTree": "<group>"},
            "F": {"isa": "PBXFileReference", "path": "in-cycle.swift", "sourceTree": "<group>"},
            "OK": {"isa": "PBXFileReference", "path": "fine.swift", "sourceTree": "<group>"},
        })
        assert [f.file_name for f in model.files] == ["fine.swift"]
        assert model.groups == ()


class TestFileKinds:
    """Test kind precedence and exclusions."""

    def test_precedence(self):
        model = resolve({
            "E": {"isa": "PBXFileReference", "path": "a.m", "sourceTree": "<group>",
                  "explicitFileType": "sourcecode.cpp.objcpp", "lastKnownFileType": "sourcecode.c.objc"},
            "L": {"isa": "PBXFileReference", "path": "b.txt", "sourceTree": "<group>",
                  "lastKnownFileType": "text.plist.xml"},
            "I": {"isa": "PBXFileReference", "path": "c.swift", "sourceTree": "<group>"},
            "N": {"isa": "PBXFileReference", "path": "d.png", "sourceTree": "<group>"},
        })
        assert [f.kind for f in model.files] == [
            "sourcecode.cpp.objcpp", "text.plist.xml", "sourcecode.swift", None,
        ]

    def test_excluded_kind(self):
        model = resolve({
            "M": {"isa": "PBXFileReference", "path": "Model.xcdatamodel", "sourceTree": "<group>",
                  "lastKnownFileType": "wrapper.xcdatamodel"},
        })
        assert model.files == ()

    def test_file_predicates(self):
        ref = FileReference(path="/work/Info.plist", kind=None, has_target_membership=False)
        assert ref.is_property_list and ref.is_source_file
        assert not ref.is_header_file and not ref.is_code

        header = FileReference(path="/work/Prefix.pch", kind="sourcecode.c.h", has_target_membership=False)
        assert header.is_header_file and header.is_code

        image = FileReference(path="/work/.hidden.png", kind="image.png", has_target_membership=True)
        assert image.is_hidden and not image.is_source_file
        assert image.name == ".hidden"


class TestMembership:
    """Test target membership through build files."""

    def test_direct_and_inherited(self):
        model = resolve({
            "FOLDER": {"isa": "PBXGroup", "children": ["INNER"], "path": "Res", "sourceTree": "<group>"},
            "INNER": {"isa": "PBXFileReference", "path": "a.png", "sourceTree": "<group>"},
            "DIRECT": {"isa": "PBXFileReference", "path": "b.swift", "sourceTree": "<group>"},
            "LOOSE": {"isa": "PBXFileReference", "path": "c.swift", "sourceTree": "<group>"},
            "BF1": {"isa": "PBXBuildFile", "fileRef": "FOLDER"},
            "BF2": {"isa": "PBXBuildFile", "fileRef": "DIRECT"},
        })
        membership = {f.file_name: f.has_target_membership for f in model.files}
        assert membership == {"a.png": True, "b.swift": True, "c.swift": False}


class TestGroups:
    """Test group resolution."""

    def test_visual_and_filesystem_paths(self):
        model = resolve({
            "MAIN": {"isa": "PBXGroup", "children": ["APP"], "sourceTree": "<group>"},
            "APP": {"isa": "PBXGroup", "children": ["VIEWS"], "path": "App", "sourceTree": "<group>"},
            "VIEWS": {"isa": "PBXGroup", "children": [], "name": "Views", "sourceTree": "<group>"},
        })
        by_name = {g.name: g for g in model.groups}
        assert set(by_name) == {"App", "Views"}
        assert by_name["Views"].visual_path == "App/Views"
        assert by_name["Views"].path is None
        assert not by_name["Views"].has_children
        assert by_name["App"].path == os.path.normpath("/work/App")
        assert by_name["App"].has_children

    def test_named_group_with_path(self):
        """The declared name wins for display; the path still locates it."""
        model = resolve({
            "G": {"isa": "PBXGroup", "children": [], "name": "Shown", "path": "on-disk", "sourceTree": "<group>"},
        })
        assert model.groups[0].visual_path == "Shown"
        assert model.groups[0].path == os.path.normpath("/work/on-disk")

    def test_variant_group(self):
        model = resolve({
            "V": {"isa": "PBXVariantGroup", "children": ["EN"], "name": "Main.storyboard", "sourceTree": "<group>"},
            "EN": {"isa": "PBXFileReference", "path": "en.lproj/Main.storyboard", "sourceTree": "<group>"},
        })
        assert [g.name for g in model.groups] == ["Main.storyboard"]

    def test_children_not_validated(self):
        """has_children reflects the declared list, even if every child is dangling."""
        model = resolve({
            "G": {"isa": "PBXGroup", "children": ["MISSING"], "name": "G", "sourceTree": "<group>"},
        })
        assert model.groups[0].has_children

    def test_incomplete_groups_skipped(self):
        model = resolve({
            "NOCHILDREN": {"isa": "PBXGroup", "name": "A", "sourceTree": "<group>"},
            "NONAME": {"isa": "PBXGroup", "children": [], "sourceTree": "<group>"},
        })
        assert model.groups == ()


class TestProducts:
    """Test native targets."""

    def test_builds_source_files(self):
        model = resolve({
            "APP": {"isa": "PBXNativeTarget", "name": "App", "buildPhases": ["SRC", "RES"]},
            "EMPTY": {"isa": "PBXNativeTarget", "name": "Empty", "buildPhases": ["NOSRC", "RES"]},
            "BARE": {"isa": "PBXNativeTarget", "name": "Bare"},
            "NONAME": {"isa": "PBXNativeTarget", "buildPhases": ["SRC"]},
            "SRC": {"isa": "PBXSourcesBuildPhase", "files": ["BF"]},
            "NOSRC": {"isa": "PBXSourcesBuildPhase", "files": []},
            "RES": {"isa": "PBXResourcesBuildPhase", "files": ["BF"]},
        })
        assert [(p.name, p.builds_source_files) for p in model.products] == [
            ("App", True), ("Empty", False), ("Bare", False),
        ]


class TestBuildConfigurations:
    """Test the point queries backed by build settings."""

    def make_model(self, **settings):
        return resolve({
            "DEBUG": {"isa": "XCBuildConfiguration", "name": "Debug", "buildSettings": settings},
            "RELEASE": {"isa": "XCBuildConfiguration", "name": "Release", "buildSettings": {}},
        })

    def test_app_icon(self):
        model = self.make_model(ASSETCATALOG_COMPILER_APPICON_NAME="AppIcon")
        assert model.references_asset_as_app_icon("AppIcon")
        assert not model.references_asset_as_app_icon("LaunchImage")

    @pytest.mark.parametrize("setting", [
        "App/Info.plist",
        "$(SRCROOT)/App/Info.plist",
        "${SRCROOT}/App/Info.plist",
        "$(PROJECT_DIR)/App/Info.plist",
    ])
    def test_info_plist(self, setting):
        model = self.make_model(INFOPLIST_FILE=setting)
        info = FileReference(path=os.path.normpath("/work/App/Info.plist"), kind=None, has_target_membership=False)
        other = FileReference(path=os.path.normpath("/work/Other/Info.plist"), kind=None, has_target_membership=False)
        assert model.references_property_list_as_info_plist(info)
        assert not model.references_property_list_as_info_plist(other)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
