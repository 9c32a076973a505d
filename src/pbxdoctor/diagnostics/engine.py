"""
Diagnostic Engine

Examines a project for a defect and, when evidence is found, produces a
Diagnosis. Every examination is a pure function of the opened project and
the filesystem, so it can be repeated or reordered freely.
"""

import logging
from typing import Iterable, List, Optional

from pbxdoctor.diagnostics import rules
from pbxdoctor.diagnostics.defects import Defect, Diagnosis, ProgressCallback

logger = logging.getLogger(__name__)


CONCLUSIONS = {
    Defect.NONEXISTENT_FILES: "non-existent files",
    Defect.NONEXISTENT_PATHS: "non-existent group paths",
    Defect.CORRUPT_PLISTS: "corrupted plists",
    Defect.DANGLING_FILES: "files not included in any target",
    Defect.UNUSED_RESOURCES: "unused resources",
    Defect.EMPTY_GROUPS: "empty groups",
    Defect.EMPTY_TARGETS: "empty targets",
}

HELP = {
    Defect.NONEXISTENT_FILES: (
        "These files are not present on the file system; they may have been moved or removed.\n"
        "Either way, each reference should be fixed or removed from the project."
    ),
    Defect.NONEXISTENT_PATHS: (
        "Left uncorrected, these paths can lead tools to map the children of each group\n"
        "to files that do not exist."
    ),
    Defect.CORRUPT_PLISTS: (
        "These files have to be repaired by hand in a plain-text editor."
    ),
    Defect.DANGLING_FILES: (
        "These files are never compiled and may be unused;\n"
        "consider whether they should be removed."
    ),
    Defect.UNUSED_RESOURCES: (
        "These files may be unused; consider whether they should be removed.\n"
        "This check cannot recognize every way a resource can be referenced and\n"
        "is prone to false positives. Proceed with caution."
    ),
    Defect.EMPTY_GROUPS: (
        "These groups have no children and may be redundant;\n"
        "consider whether they should be removed."
    ),
    Defect.EMPTY_TARGETS: (
        "These targets compile no sources and may be redundant;\n"
        "consider whether they should be removed."
    ),
}


def _collect_cases(project, defect: Defect, progress: Optional[ProgressCallback]) -> List[str]:
    if defect == Defect.NONEXISTENT_FILES:
        return rules.nonexistent_file_paths(project)
    if defect == Defect.NONEXISTENT_PATHS:
        return rules.nonexistent_group_paths(project)
    if defect == Defect.CORRUPT_PLISTS:
        return rules.corrupt_property_list_cases(project, progress=progress)
    if defect == Defect.DANGLING_FILES:
        return rules.dangling_file_paths(project)
    if defect == Defect.UNUSED_RESOURCES:
        return rules.unused_resource_names(project, progress=progress)
    if defect == Defect.EMPTY_GROUPS:
        return rules.empty_group_paths(project)
    if defect == Defect.EMPTY_TARGETS:
        return rules.empty_target_names(project)
    raise ValueError(f"Unhandled defect: {defect}")


def examine(project, defect: Defect, progress: Optional[ProgressCallback] = None) -> Optional[Diagnosis]:
    """
    Examine a project for a single defect.

    Args:
        project: an opened XcodeProject
        defect: the condition to look for
        progress: called as (n, total, label) while scanning files; only the
            corrupt-plists and unused-resources checks report progress

    Returns:
        A Diagnosis with at least one case, or None if the defect is absent
    """
    logger.info(f"Examining for {defect.value}")
    cases = _collect_cases(project, defect, progress)
    if not cases:
        return None
    logger.debug(f"{defect.value}: {len(cases)} cases")
    return Diagnosis(
        defect=defect,
        conclusion=CONCLUSIONS[defect],
        help=HELP[defect],
        cases=tuple(cases),
    )


def examine_all(
    project,
    defects: Optional[Iterable[Defect]] = None,
    progress: Optional[ProgressCallback] = None,
) -> List[Diagnosis]:
    """Examine a project for several defects (all by default), in Defect order."""
    requested = set(defects) if defects is not None else set(Defect)
    diagnoses = []
    for defect in Defect:
        if defect not in requested:
            continue
        diagnosis = examine(project, defect, progress=progress)
        if diagnosis is not None:
            diagnoses.append(diagnosis)
    return diagnoses
