from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from ..schemas.manifest import MANIFEST_NAME, Manifest

logger = logging.getLogger(__name__)


def iter_ancestors(start: Path) -> Iterator[Path]:
    """Yield ``start`` and then each parent, ending at the filesystem root."""
    cur = start
    while True:
        yield cur
        parent = cur.parent
        if parent == cur:
            return
        cur = parent


def find_workspace_root(start: Path | None = None, manifest_name: str = MANIFEST_NAME) -> Path | None:
    """Find the workspace root by walking upwards until a manifest declares workspaces.

    The start directory is made absolute but symlinks are kept, so the path
    handed back lines up with the directory the user is standing in.
    Returns None when no ancestor qualifies.
    """
    cur = Path(os.path.abspath(start or Path.cwd()))
    for directory in iter_ancestors(cur):
        manifest = Manifest.read(directory, manifest_name)
        if manifest is not None and manifest.declares_workspaces:
            logger.debug("Workspace root: %s", directory)
            return directory
    logger.debug("No workspace root above %s", cur)
    return None
