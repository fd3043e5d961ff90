from __future__ import annotations

import logging
from typing import Optional

from routeguard.domain.diagnostics import Diagnostics
from routeguard.domain.errors import ResolutionError
from routeguard.domain.models import (
    DEFAULT_HTTP_METHODS,
    Absent,
    AnnotationValue,
    LiteralValue,
    RouteRecord,
    describe_value,
)
from routeguard.extractors.spring.annotations import (
    RouteMarker,
    SecurityKind,
    SecurityMarker,
    classify_annotation,
)
from routeguard.extractors.spring.resolver import resolve_method, resolve_urls
from routeguard.extractors.spring.syntax import AnnotationRef, JavaSyntaxModel, MethodDecl

logger = logging.getLogger(__name__)


def url_argument(model: JavaSyntaxModel, annotation: AnnotationRef) -> AnnotationValue:
    # Spring declares `path` as an alias for `value`
    value = model.annotation_argument(annotation, "value")
    if isinstance(value, Absent):
        value = model.annotation_argument(annotation, "path")
    return value


def security_expressions(model: JavaSyntaxModel, method: MethodDecl) -> dict[SecurityKind, str]:
    out: dict[SecurityKind, str] = {}
    for ann in model.annotations_of(method):
        category = classify_annotation(ann.name)
        if isinstance(category, SecurityMarker):
            # a repeated annotation overwrites the earlier one
            out[category.kind] = _expression_text(model.annotation_argument(ann, "value"))
    return out


def _expression_text(value: AnnotationValue) -> str:
    if isinstance(value, Absent):
        return ""
    if isinstance(value, LiteralValue):
        return value.text
    return describe_value(value)


def compose_for_method(
    model: JavaSyntaxModel,
    method: MethodDecl,
    diagnostics: Diagnostics,
) -> list[RouteRecord]:
    """
    Expand every route annotation on a method into route records.

    Each route annotation contributes url x http-method records carrying the
    method's guard expressions. An annotation whose arguments cannot be
    resolved is reported and contributes nothing.
    """
    guards = security_expressions(model, method)
    records: list[RouteRecord] = []

    for ann in model.annotations_of(method):
        category = classify_annotation(ann.name)
        if not isinstance(category, RouteMarker):
            continue

        try:
            urls = resolve_urls(url_argument(model, ann))
            http_methods = _http_methods(model, ann, category)
        except ResolutionError as exc:
            diagnostics.report(model.owner_path(ann), exc.message, exc.kind)
            continue

        for url in urls if urls is not None else [""]:
            for http_method in http_methods:
                records.append(
                    RouteRecord(
                        url=url,
                        http_method=http_method,
                        pre_authorization=guards.get(SecurityKind.PRE_AUTHORIZE, ""),
                        post_authorization=guards.get(SecurityKind.POST_AUTHORIZE, ""),
                        pre_filter=guards.get(SecurityKind.PRE_FILTER, ""),
                        post_filter=guards.get(SecurityKind.POST_FILTER, ""),
                    )
                )

    logger.debug("%s: %d route record(s)", method.path, len(records))
    return records


def _http_methods(model: JavaSyntaxModel, ann: AnnotationRef, marker: RouteMarker) -> tuple[str, ...]:
    if marker.http_method is not None:
        return (marker.http_method,)
    declared: Optional[str] = resolve_method(model.annotation_argument(ann, "method"))
    if declared is None:
        return DEFAULT_HTTP_METHODS
    return (declared,)
