"""
CLI entry point for pbxdoctor.

Usage:
    pbxdoctor                              Examine the project in the current directory
    pbxdoctor path/to/App.xcodeproj        Examine a specific project
    pbxdoctor path/to/dir -d empty-groups  Examine for selected defects only
    pbxdoctor --json                       Print diagnoses as JSON
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pbxdoctor import __version__
from pbxdoctor.config import ConfigError, get_config
from pbxdoctor.diagnostics import Defect, examine
from pbxdoctor.project import ProjectError, XcodeProject

logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_DEFECTS = 1
EXIT_ERROR = 2


def print_progress(n: int, total: int, label=None):
    """Draw [n/total] on stderr, overwriting the previous line."""
    suffix = f" {label}" if label else ""
    sys.stderr.write(f"\r\033[K[{n}/{total}]{suffix}")
    if n >= total and label is None:
        sys.stderr.write("\r\033[K")
    sys.stderr.flush()


def cmd_examine(args) -> int:
    """Open a project and examine it for defects."""
    try:
        project = XcodeProject.open(args.path)
    except ProjectError as e:
        print(f"error: {args.path}: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        config = get_config(args.config, project_root=project.location.root)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.defects:
        try:
            defects = [Defect.from_name(name) for name in args.defects]
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_ERROR
    else:
        defects = config.defects

    progress = print_progress if (args.progress or config.progress) else None

    diagnoses = []
    for defect in defects:
        diagnosis = config.apply(examine(project, defect, progress=progress))
        if diagnosis is not None:
            diagnoses.append(diagnosis)

    if args.json:
        print(json.dumps([d.to_dict() for d in diagnoses], indent=2))
    elif diagnoses:
        for diagnosis in diagnoses:
            print(diagnosis)
            print()
        print(f"{len(diagnoses)} defects found")
    else:
        print("No defects found")

    return EXIT_DEFECTS if diagnoses else EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    defect_names = ", ".join(defect.value for defect in Defect)
    parser = argparse.ArgumentParser(
        prog="pbxdoctor",
        description="Examine an Xcode project for structural defects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Defects:
    {defect_names}

Examples:
    pbxdoctor ~/Development/App/
    pbxdoctor App.xcodeproj -d dangling-files -d unused-resources
    pbxdoctor --json > report.json
"""
    )
    parser.add_argument('--version', action='version', version=f'pbxdoctor {__version__}')
    parser.add_argument('path', nargs='?', default='.',
                        help='Project bundle, or a directory containing one (default: current directory)')
    parser.add_argument('-d', '--defect', dest='defects', action='append', metavar='DEFECT',
                        help='Defect to examine for; may be repeated (default: all, or as configured)')
    parser.add_argument('-c', '--config', type=Path, help='Path to a YAML configuration file')
    parser.add_argument('--json', action='store_true', help='Output as JSON')
    parser.add_argument('--progress', action='store_true', help='Show progress of slow scans on stderr')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    return cmd_examine(args)


if __name__ == "__main__":
    sys.exit(main())
