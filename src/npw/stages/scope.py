from __future__ import annotations

import os
import shlex
from pathlib import Path, PurePosixPath
from typing import Sequence


def workspace_path(root: Path, cwd: Path) -> str:
    """Path of ``cwd`` relative to ``root``, with forward slashes."""
    rel = os.path.relpath(cwd, root)
    return PurePosixPath(*Path(rel).parts).as_posix()


def scope_args(args: Sequence[str], root: Path, cwd: Path, scope_flag: str = "-w") -> list[str]:
    """Return ``args`` with ``scope_flag <relpath>`` spliced in after the subcommand.

    Nothing is inserted when ``cwd`` is the root itself.
    """
    out = list(args)
    if Path(cwd) == Path(root):
        return out
    out[1:1] = [scope_flag, workspace_path(root, cwd)]
    return out


def describe(command: str, args: Sequence[str]) -> str:
    return shlex.join([command, *args])
