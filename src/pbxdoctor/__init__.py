"""
pbxdoctor - Xcode Project Linter

Reads an .xcodeproj without modifying it and reports structural defects:
dangling references, unused resources, empty groups and targets, and
corrupt property lists.
"""

__version__ = "0.1.0"
__author__ = "pbxdoctor contributors"

from pbxdoctor.project import XcodeProject, ProjectNotFoundError, IncompatibleProjectError
from pbxdoctor.diagnostics import Defect, Diagnosis, examine, examine_all
