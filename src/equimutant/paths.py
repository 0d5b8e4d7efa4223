"""
equimutant Path Configuration

Centralized path management for equimutant state files.
All paths are relative to the project root (current working directory).

Directory Structure:
.equimutant/
├── config.json          # Local config overrides
└── logs/                # Log files (only when file logging is enabled)
"""

from pathlib import Path
from typing import Optional


class EquimutantPaths:
    """
    Centralized path configuration for equimutant.

    All paths are lazily resolved relative to project_root.
    Default project_root is current working directory.
    """

    STATE_DIR = ".equimutant"
    GLOBAL_DIR = Path.home() / ".equimutant"

    CONFIG_NAME = "config.json"
    LOGS_DIR = "logs"

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize paths configuration.

        Args:
            project_root: Root directory for the project. Defaults to CWD.
        """
        self._project_root = project_root

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is None:
            return Path.cwd()
        return self._project_root

    @property
    def state_dir(self) -> Path:
        """Get the .equimutant directory path."""
        return self.project_root / self.STATE_DIR

    @property
    def local_config(self) -> Path:
        return self.state_dir / self.CONFIG_NAME

    @property
    def global_config(self) -> Path:
        return self.GLOBAL_DIR / self.CONFIG_NAME

    @property
    def logs_dir(self) -> Path:
        return self.state_dir / self.LOGS_DIR

    def ensure_dirs(self) -> None:
        """Create the state directory tree if it doesn't exist."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(exist_ok=True)


_paths: Optional[EquimutantPaths] = None


def get_paths(project_root: Optional[Path] = None) -> EquimutantPaths:
    """
    Get the paths object for a project root.

    Without an explicit root the CWD-relative instance is cached.
    """
    global _paths
    if project_root is not None:
        return EquimutantPaths(project_root)
    if _paths is None:
        _paths = EquimutantPaths()
    return _paths
