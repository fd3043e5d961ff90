from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from routeguard.domain.diagnostics import Diagnostic, Diagnostics
from routeguard.domain.errors import ResolutionError
from routeguard.domain.models import RouteRecord
from routeguard.extractors.spring.annotations import (
    CONTROLLER_NAMES,
    REQUEST_MAPPING,
    ROUTE_NAMES,
)
from routeguard.extractors.spring.composer import compose_for_method, url_argument
from routeguard.extractors.spring.resolver import resolve_urls
from routeguard.extractors.spring.syntax import ClassDecl, JavaSyntaxModel, load_syntax_model
from routeguard.repo.project import load_project
from routeguard.repo.scanner import scan_java_files
from routeguard.store.memory_store import RouteStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    store: RouteStore
    diagnostics: Diagnostics
    controllers: int
    handler_methods: int

    @property
    def failed(self) -> bool:
        return self.diagnostics.failed


@dataclass(frozen=True)
class AnalyzeResult:
    project_root: str
    build_tool: str
    source_roots: list[str]
    files_scanned: int
    controllers: int
    handler_methods: int
    records: list[RouteRecord]
    diagnostics: list[Diagnostic]

    @property
    def failed(self) -> bool:
        return bool(self.diagnostics)


def join_url(prefix: str, url: str) -> str:
    separator = "" if not url or url.startswith("/") else "/"
    return prefix + separator + url


def class_prefixes(
    model: JavaSyntaxModel,
    cls: ClassDecl,
    diagnostics: Diagnostics,
) -> Optional[list[str]]:
    """URL prefixes declared by a controller's RequestMapping; None if they cannot be resolved."""
    ann = model.class_annotation(cls, REQUEST_MAPPING)
    if ann is None:
        return [""]
    try:
        urls = resolve_urls(url_argument(model, ann))
    except ResolutionError as exc:
        diagnostics.report(model.owner_path(ann), exc.message, exc.kind)
        return None
    return urls if urls is not None else [""]


def run_extraction(
    model: JavaSyntaxModel,
    store: Optional[RouteStore] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> ExtractionResult:
    """
    Populate a route store from every controller in the model.

    Errors on individual annotations are collected in `diagnostics` and the
    scan carries on; the store holds whatever could be extracted.
    """
    store = store if store is not None else RouteStore()
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    controllers = model.find_classes_with_any_annotation(CONTROLLER_NAMES)
    handler_methods = 0

    for cls in controllers:
        prefixes = class_prefixes(model, cls, diagnostics)
        if prefixes is None:
            continue

        # compose once per method so a bad annotation is reported once
        composed = [
            compose_for_method(model, method, diagnostics)
            for method in model.methods_with_any_annotation(cls, ROUTE_NAMES)
        ]
        handler_methods += len(composed)

        for prefix in prefixes:
            for records in composed:
                for r in records:
                    routed = r.with_url(join_url(prefix, r.url))
                    store.insert(routed.key, routed)

    logger.debug(
        "extracted %d route(s) from %d controller(s), %d diagnostic(s)",
        len(store),
        len(controllers),
        len(diagnostics),
    )
    return ExtractionResult(
        store=store,
        diagnostics=diagnostics,
        controllers=len(controllers),
        handler_methods=handler_methods,
    )


def sorted_records(records) -> list[RouteRecord]:
    # stable report order
    return sorted(records, key=lambda r: (r.url, r.http_method))


def run_analyze(project_path: Path, max_files: int | None = None) -> AnalyzeResult:
    """Load the project at `project_path` and extract its routes. Raises ProjectLoadFailure."""
    project = load_project(project_path)
    diagnostics = Diagnostics()

    java_files = scan_java_files(project.source_roots, max_files=max_files)
    model = load_syntax_model(java_files, diagnostics, repo_root=project.root)
    result = run_extraction(model, diagnostics=diagnostics)

    return AnalyzeResult(
        project_root=str(project.root),
        build_tool=project.build_tool,
        source_roots=[str(r) for r in project.source_roots],
        files_scanned=len(java_files),
        controllers=result.controllers,
        handler_methods=result.handler_methods,
        records=sorted_records(result.store.list_all()),
        diagnostics=list(diagnostics),
    )
