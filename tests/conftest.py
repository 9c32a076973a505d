"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pbxdoctor.project import XcodeProject


# =============================================================================
# OPENSTEP WRITER
# =============================================================================

def quote(value: str) -> str:
    """Quote a string for an OpenStep property list."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def to_openstep(value, indent: int = 0) -> str:
    """Serialize dicts, lists and strings as an OpenStep property list."""
    pad = "\t" * indent
    if isinstance(value, dict):
        lines = ["{"]
        for key, item in value.items():
            lines.append(f"{pad}\t{quote(key)} = {to_openstep(item, indent + 1)};")
        lines.append(f"{pad}}}")
        return "\n".join(lines)
    if isinstance(value, (list, tuple)):
        items = "".join(f"{to_openstep(item, indent + 1)}, " for item in value)
        return f"({items})"
    return quote(str(value))


# =============================================================================
# PROJECT BUILDER
# =============================================================================

class ProjectBuilder:
    """
    Builds an .xcodeproj bundle (and the files it refers to) on disk.

    Every add method returns the new object's id, so objects can be wired
    together:
        icon = builder.file("icon.png")
        builder.group([icon], path="App")
        project = builder.open()
    """

    def __init__(self, root: Path, name: str = "Sample"):
        self.root = root
        self.name = name
        self.objects: Dict[str, dict] = {}
        self._counter = 0

    @property
    def bundle(self) -> Path:
        return self.root / f"{self.name}.xcodeproj"

    def add(self, isa: str, **properties) -> str:
        self._counter += 1
        object_id = f"{self._counter:024X}"
        entry = {"isa": isa}
        entry.update({key: value for key, value in properties.items() if value is not None})
        self.objects[object_id] = entry
        return object_id

    def file(self, path: str, source_tree: str = "<group>", kind: Optional[str] = None,
             explicit_kind: Optional[str] = None, name: Optional[str] = None) -> str:
        return self.add(
            "PBXFileReference",
            path=path,
            sourceTree=source_tree,
            lastKnownFileType=kind,
            explicitFileType=explicit_kind,
            name=name,
        )

    def group(self, children=(), path: Optional[str] = None, name: Optional[str] = None,
              source_tree: str = "<group>", isa: str = "PBXGroup") -> str:
        return self.add(isa, children=list(children), path=path, name=name, sourceTree=source_tree)

    def build_file(self, file_ref: str) -> str:
        return self.add("PBXBuildFile", fileRef=file_ref)

    def sources_phase(self, files=()) -> str:
        return self.add("PBXSourcesBuildPhase", files=list(files))

    def resources_phase(self, files=()) -> str:
        return self.add("PBXResourcesBuildPhase", files=list(files))

    def target(self, name: str, phases=()) -> str:
        return self.add("PBXNativeTarget", name=name, buildPhases=list(phases))

    def build_configuration(self, name: str = "Debug", **settings) -> str:
        return self.add("XCBuildConfiguration", name=name, buildSettings=settings)

    def member(self, path: str, **kwargs) -> str:
        """A file reference included in a build phase."""
        file_ref = self.file(path, **kwargs)
        self.build_file(file_ref)
        return file_ref

    def write_file(self, relative_path: str, content="") -> Path:
        """Create a file under the project root."""
        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    def make_dir(self, relative_path: str) -> Path:
        path = self.root / relative_path
        path.mkdir(parents=True, exist_ok=True)
        return path

    def write(self) -> Path:
        """Write project.pbxproj and return the bundle path."""
        self.bundle.mkdir(parents=True, exist_ok=True)
        document = {
            "archiveVersion": "1",
            "classes": {},
            "objectVersion": "46",
            "objects": self.objects,
            "rootObject": "000000000000000000000000",
        }
        text = "// !$*UTF8*$!\n" + to_openstep(document) + "\n"
        (self.bundle / "project.pbxproj").write_text(text, encoding="utf-8")
        return self.bundle

    def open(self) -> XcodeProject:
        return XcodeProject.open(self.write())


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def builder(tmp_path):
    """A ProjectBuilder rooted in a fresh temporary directory."""
    return ProjectBuilder(tmp_path / "project")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's own configuration out of tests."""
    monkeypatch.setattr("pbxdoctor.config.USER_CONFIG_PATH", tmp_path / "no-user-config.yaml")
    monkeypatch.delenv("PBXDOCTOR_CONFIG", raising=False)
    monkeypatch.delenv("PBXDOCTOR_DEFECTS", raising=False)
