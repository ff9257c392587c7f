from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"


def _truthy(value: Any) -> bool:
    # npm treats an empty workspaces list as declared, so only scalars can be falsy.
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == value and value != 0
    if isinstance(value, str):
        return value != ""
    return True


class Manifest(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    workspaces: Any = None

    @property
    def declares_workspaces(self) -> bool:
        return _truthy(self.workspaces)

    @classmethod
    def read(cls, directory: Path, name: str = MANIFEST_NAME) -> Manifest | None:
        """Load the manifest in ``directory``.

        Returns None when the file is missing, unreadable, not valid JSON, or
        not a JSON object. Most ancestors of a workspace have no manifest, so
        none of these are errors.
        """
        path = directory / name
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("No usable manifest at %s: %s", path, e)
            return None
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            logger.debug("Ignoring malformed manifest %s (%d errors)", path, e.error_count())
            return None
