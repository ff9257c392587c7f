import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = (ROOT / "src").resolve()

if SRC not in (Path(p).resolve() for p in sys.path):
    sys.path.insert(0, str(SRC))


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """An npm workspace at tmp_path/ws with packages pkgs/foo and pkgs/bar."""
    ws = tmp_path / "ws"
    for name in ("foo", "bar"):
        pkg = ws / "pkgs" / name
        pkg.mkdir(parents=True)
        (pkg / "package.json").write_text(json.dumps({"name": name, "version": "1.0.0"}))
    (ws / "package.json").write_text(json.dumps({"name": "ws", "private": True, "workspaces": ["pkgs/*"]}))
    return ws
