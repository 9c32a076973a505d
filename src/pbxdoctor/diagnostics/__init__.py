"""
pbxdoctor.diagnostics - Defect Detection

- defects: Defect, Diagnosis, ProgressCallback
- rules: evidence collection for each defect
- resources: heuristic unused-resources scanner
- patterns: comment stripping and usage search strings
- engine: examine / examine_all
"""

from pbxdoctor.diagnostics.defects import Defect, Diagnosis, ProgressCallback
from pbxdoctor.diagnostics.resources import Resource, ResourceScanner
from pbxdoctor.diagnostics.engine import examine, examine_all

__all__ = [
    "Defect",
    "Diagnosis",
    "ProgressCallback",
    "Resource",
    "ResourceScanner",
    "examine",
    "examine_all",
]
