"""
Defects and Diagnoses

A Defect is an undesired condition a project can be examined for; a
Diagnosis is the evidence produced when one is found.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple


class Defect(Enum):
    """The conditions a project can be examined for."""

    # A file reference resolves to a file that does not exist on disk
    NONEXISTENT_FILES = "nonexistent-files"

    # A group resolves to a directory that does not exist on disk
    NONEXISTENT_PATHS = "nonexistent-paths"

    # A property list (.plist) fails to deserialize
    CORRUPT_PLISTS = "corrupt-plists"

    # A source file has no target membership
    DANGLING_FILES = "dangling-files"

    # A resource (including asset catalog items) never appears in any source
    # file. Heuristic; prone to both false positives and missed cases.
    UNUSED_RESOURCES = "unused-resources"

    # A group has zero children
    EMPTY_GROUPS = "empty-groups"

    # A native target compiles no source files
    EMPTY_TARGETS = "empty-targets"

    @classmethod
    def from_name(cls, name: str) -> "Defect":
        """Look up a defect by its value or member name (case-insensitive)."""
        normalized = name.strip().lower().replace("_", "-")
        for defect in cls:
            if defect.value == normalized:
                return defect
        raise ValueError(f"Unknown defect: {name!r}")


@dataclass(frozen=True)
class Diagnosis:
    """A found defect and the concrete cases causing it."""
    defect: Defect
    conclusion: str     # short label, e.g. "empty groups"
    help: str           # how to go about dealing with it
    cases: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "defect": self.defect.value,
            "conclusion": self.conclusion,
            "help": self.help,
            "cases": list(self.cases),
        }

    def __str__(self):
        lines = [f"[{self.defect.value}] {self.conclusion} ({len(self.cases)})"]
        for line in self.help.splitlines():
            lines.append(f"    {line}")
        for case in self.cases:
            lines.append(f"  - {case}")
        return "\n".join(lines)


# (n, total, label) - label is the current item's name, when there is one
ProgressCallback = Callable[[int, int, Optional[str]], None]
