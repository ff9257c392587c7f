from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from .manifest import MANIFEST_NAME


class InvocationOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    quiet: bool = False
    # None: no shell. "": the default shell. Anything else: that shell executable.
    shell: str | None = None
    args: tuple[str, ...] = Field(default_factory=tuple)


@dataclass(frozen=True)
class LauncherConfig:
    ENV_COMMAND = "NPW_NPM"
    ENV_DEBUG = "NPW_DEBUG"

    command: str = "npm"
    manifest_name: str = MANIFEST_NAME
    scope_flag: str = "-w"
    interrupt_exit_code: int = 2
    default_shell: str = "/bin/sh"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LauncherConfig:
        env = os.environ if environ is None else environ
        command = (env.get(cls.ENV_COMMAND) or "").strip()
        if not command:
            return cls()
        return cls(command=command)

    @classmethod
    def debug_enabled(cls, environ: Mapping[str, str] | None = None) -> bool:
        env = os.environ if environ is None else environ
        return (env.get(cls.ENV_DEBUG) or "").strip().lower() not in ("", "0", "false", "no")

    def resolve_shell(self, shell: str | None) -> str | None:
        if shell is None:
            return None
        return shell or self.default_shell
