"""Where receipt-tally looks for its config file and default receipts.

The project root is ``$RECEIPT_TALLY_HOME`` when set, otherwise the current
working directory. Modules ask ``get_paths()`` instead of building paths.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

HOME_ENV_VAR = "RECEIPT_TALLY_HOME"
CONFIG_DIR_NAME = "config"
CONFIG_FILE_NAME = "receipt_tally.toml"
RECEIPTS_DIR_NAME = "receipts"


@dataclass(frozen=True)
class ProjectPaths:
    """Resolved locations under one project root."""

    root: Path

    @classmethod
    def from_environment(cls) -> ProjectPaths:
        override = os.environ.get(HOME_ENV_VAR)
        root = Path(override).expanduser() if override else Path.cwd()
        return cls(root=root.resolve())

    @property
    def config(self) -> Path:
        return self.root / CONFIG_DIR_NAME

    @property
    def tally_config(self) -> Path:
        """Tally options file (similarity threshold, price ceiling, denylist)."""
        return self.config / CONFIG_FILE_NAME

    @property
    def receipts(self) -> Path:
        """Directory scanned by ``receipt-tally tally`` when none is given."""
        return self.root / RECEIPTS_DIR_NAME


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Return the process-wide ProjectPaths, resolving it on first use."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths.from_environment()
    return _paths


def reset_paths() -> None:
    """Forget the cached paths so the environment is read again."""
    global _paths
    _paths = None
