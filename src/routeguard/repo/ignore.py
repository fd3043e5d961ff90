from __future__ import annotations

from pathlib import Path

DEFAULT_IGNORES = {
    ".git",
    ".svn",
    ".idea",
    ".vscode",
    ".gradle",
    ".mvn",
    "target",
    "build",
    "out",
    "bin",
    "node_modules",
}


def should_ignore_dir(dir_path: Path) -> bool:
    return dir_path.name in DEFAULT_IGNORES
