"""
pbxdoctor Configuration

Loads configuration from a YAML file or environment variables.
Selects which defects to examine and which cases to leave out of reports.
"""

import fnmatch
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from pbxdoctor.diagnostics.defects import Defect, Diagnosis

logger = logging.getLogger(__name__)


CONFIG_ENV_VAR = "PBXDOCTOR_CONFIG"
DEFECTS_ENV_VAR = "PBXDOCTOR_DEFECTS"
PROJECT_CONFIG_NAME = ".pbxdoctor.yaml"
USER_CONFIG_PATH = Path.home() / ".pbxdoctor" / "config.yaml"


DEFAULT_CONFIG = {
    # Defects to examine, by name; all of them unless narrowed down
    "defects": [defect.value for defect in Defect],

    # fnmatch patterns; cases matching any of them are not reported
    # e.g. "*/Pods/*" or "LaunchImage"
    "ignore": [],

    # Draw [n/total] progress on stderr during the slow scans
    "progress": False,
}


class ConfigError(ValueError):
    """Configuration contents are invalid."""


def _parse_defects(names: Any) -> List[Defect]:
    if isinstance(names, str):
        names = [name for name in names.split(",") if name.strip()]
    if not isinstance(names, (list, tuple)):
        raise ConfigError(f"'defects' must be a list of defect names, got {type(names).__name__}")
    defects = []
    for name in names:
        try:
            defect = Defect.from_name(str(name))
        except ValueError as e:
            raise ConfigError(str(e)) from e
        if defect not in defects:
            defects.append(defect)
    return defects


class DoctorConfig:
    """Configuration for examining a project."""

    def __init__(self, config_path: Optional[Path] = None, project_root: Optional[Path] = None):
        self._config: Dict[str, Any] = dict(DEFAULT_CONFIG)
        self._config_path: Optional[Path] = None

        # Load from file if found
        self._load_config(config_path, project_root)

        # Override with environment variables
        self._apply_env_overrides()

        self._defects = _parse_defects(self._config.get("defects"))
        ignore = self._config.get("ignore") or []
        if isinstance(ignore, str):
            ignore = [ignore]
        if not isinstance(ignore, list):
            raise ConfigError(f"'ignore' must be a list of patterns, got {type(ignore).__name__}")
        self._ignore = [str(pattern) for pattern in ignore]

    @staticmethod
    def search_paths(explicit_path: Optional[Path] = None, project_root: Optional[Path] = None) -> List[Path]:
        """Candidate config files, in the order they are checked."""
        if explicit_path:
            return [Path(explicit_path)]
        paths = []
        if os.environ.get(CONFIG_ENV_VAR):
            paths.append(Path(os.environ[CONFIG_ENV_VAR]))
        if project_root is not None:
            paths.append(Path(project_root) / PROJECT_CONFIG_NAME)
        paths.append(USER_CONFIG_PATH)
        return paths

    def _load_config(self, explicit_path: Optional[Path], project_root: Optional[Path]) -> None:
        """Load configuration from the first YAML file found."""
        if explicit_path and not Path(explicit_path).exists():
            raise ConfigError(f"Config file not found: {explicit_path}")

        for config_path in self.search_paths(explicit_path, project_root):
            if not config_path.exists():
                continue
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    user_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {config_path}: {e}")
                return
            if not isinstance(user_config, dict):
                logger.warning(f"Ignoring config {config_path}: expected a mapping at top level")
                return
            self._config.update(user_config)
            self._config_path = config_path
            logger.debug(f"Loaded config from {config_path}")
            return

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        if DEFECTS_ENV_VAR in os.environ:
            self._config["defects"] = os.environ[DEFECTS_ENV_VAR]

    @property
    def config_path(self) -> Optional[Path]:
        """Path to loaded config file, or None if using defaults."""
        return self._config_path

    @property
    def defects(self) -> List[Defect]:
        """Defects to examine, in configured order."""
        return list(self._defects)

    @property
    def ignore(self) -> List[str]:
        return list(self._ignore)

    @property
    def progress(self) -> bool:
        return bool(self._config.get("progress", False))

    def is_ignored(self, case: str) -> bool:
        return any(fnmatch.fnmatchcase(case, pattern) for pattern in self._ignore)

    def apply(self, diagnosis: Optional[Diagnosis]) -> Optional[Diagnosis]:
        """Drop ignored cases; None if none are left."""
        if diagnosis is None:
            return None
        cases = tuple(case for case in diagnosis.cases if not self.is_ignored(case))
        if not cases:
            return None
        if len(cases) == len(diagnosis.cases):
            return diagnosis
        return replace(diagnosis, cases=cases)

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as dict."""
        return {
            "defects": [defect.value for defect in self._defects],
            "ignore": list(self._ignore),
            "progress": self.progress,
            "config_file": str(self._config_path) if self._config_path else None,
        }


def get_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> DoctorConfig:
    """Load configuration for a project."""
    return DoctorConfig(config_path, project_root)
