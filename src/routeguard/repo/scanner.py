from __future__ import annotations

from pathlib import Path
from typing import Iterable

from routeguard.repo.ignore import should_ignore_dir


def scan_java_files(source_roots: Iterable[Path], max_files: int | None = None) -> list[Path]:
    """
    Return absolute paths of the .java files under the given source roots.
    Sorted per root so traversal order is deterministic.
    """
    out: list[Path] = []
    seen: set[Path] = set()
    for source_root in source_roots:
        found: list[Path] = []
        for root, dirs, files in _walk(source_root):
            root_p = Path(root)

            # prune ignored dirs
            dirs[:] = [d for d in dirs if not should_ignore_dir(root_p / d)]

            for f in files:
                if f.endswith(".java"):
                    found.append((root_p / f).resolve())

        for p in sorted(found):
            if p in seen:
                continue
            seen.add(p)
            out.append(p)
            if max_files is not None and len(out) >= max_files:
                return out
    return out


def _walk(path: Path):
    # Separate helper to make unit testing easier (can be mocked)
    return __import__("os").walk(path)
