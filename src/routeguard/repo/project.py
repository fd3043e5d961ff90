from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from routeguard.domain.errors import ProjectLoadFailure

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_DIR = Path("src") / "main" / "java"

_GRADLE_BUILD_FILES = ("build.gradle", "build.gradle.kts")
_GRADLE_SETTINGS_FILES = ("settings.gradle", "settings.gradle.kts")
_GRADLE_INCLUDE = re.compile(r"""^\s*include\b\s*\(?(?P<args>[^)\n]*)\)?""", re.MULTILINE)
_QUOTED = re.compile(r"""["']([^"']+)["']""")


@dataclass(frozen=True)
class JavaProject:
    root: Path
    build_tool: str  # "maven" | "gradle"
    source_roots: list[Path] = field(default_factory=list)


def load_project(project_path: Path) -> JavaProject:
    """
    Resolve a project directory to its application source roots.

    Raises ProjectLoadFailure when no model can be built for the path.
    """
    root = project_path.expanduser().resolve()
    if not root.exists():
        raise ProjectLoadFailure(f"Project path does not exist: {root}")
    if not root.is_dir():
        raise ProjectLoadFailure(f"Project path is not a directory: {root}")

    if (root / "pom.xml").is_file():
        roots = _maven_source_roots(root, visited=set())
        build_tool = "maven"
    elif any((root / name).is_file() for name in _GRADLE_BUILD_FILES):
        roots = _gradle_source_roots(root)
        build_tool = "gradle"
    else:
        raise ProjectLoadFailure(f"No build descriptor (pom.xml, build.gradle) found in {root}")

    existing = []
    for r in roots:
        if r.is_dir():
            existing.append(r)
        else:
            logger.debug("skipping missing source root %s", r)

    logger.debug("%s project at %s with %d source root(s)", build_tool, root, len(existing))
    return JavaProject(root=root, build_tool=build_tool, source_roots=existing)


def _maven_source_roots(module_dir: Path, visited: set[Path]) -> list[Path]:
    module_dir = module_dir.resolve()
    if module_dir in visited:
        return []
    visited.add(module_dir)

    pom = module_dir / "pom.xml"
    if not pom.is_file():
        raise ProjectLoadFailure(f"Maven module has no pom.xml: {module_dir}")

    try:
        root = ET.parse(pom).getroot()
    except ET.ParseError as exc:
        raise ProjectLoadFailure(f"Malformed build descriptor {pom}: {exc}") from exc

    ns = {"m": root.tag[1:].split("}", 1)[0]} if root.tag.startswith("{") else {}

    def find_text(path: str) -> str | None:
        if ns:
            path = "/".join(f"m:{part}" for part in path.split("/"))
        node = root.find(path, ns)
        return node.text.strip() if node is not None and node.text else None

    source_dir = find_text("build/sourceDirectory")
    roots = [module_dir / source_dir if source_dir else module_dir / DEFAULT_SOURCE_DIR]

    modules_path = "m:modules/m:module" if ns else "modules/module"
    for mod in root.findall(modules_path, ns):
        if not mod.text or not mod.text.strip():
            continue
        child = module_dir / mod.text.strip()
        if not child.is_dir():
            raise ProjectLoadFailure(f"Maven module directory not found: {child}")
        roots.extend(_maven_source_roots(child, visited))
    return roots


def _gradle_source_roots(root: Path) -> list[Path]:
    roots = [root / DEFAULT_SOURCE_DIR]
    for name in _GRADLE_SETTINGS_FILES:
        settings = root / name
        if not settings.is_file():
            continue
        text = settings.read_text(encoding="utf-8", errors="ignore")
        for m in _GRADLE_INCLUDE.finditer(text):
            for project in _QUOTED.findall(m.group("args")):
                # ":api:core" -> api/core
                rel = project.strip(":").replace(":", "/")
                if rel:
                    roots.append(root / rel / DEFAULT_SOURCE_DIR)
    return roots
