from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

CONTROLLER = "Controller"
REST_CONTROLLER = "RestController"

REQUEST_MAPPING = "RequestMapping"
GET_MAPPING = "GetMapping"
POST_MAPPING = "PostMapping"
PUT_MAPPING = "PutMapping"
DELETE_MAPPING = "DeleteMapping"
PATCH_MAPPING = "PatchMapping"


class SecurityKind(str, Enum):
    PRE_AUTHORIZE = "PreAuthorize"
    POST_AUTHORIZE = "PostAuthorize"
    PRE_FILTER = "PreFilter"
    POST_FILTER = "PostFilter"


@dataclass(frozen=True)
class ControllerMarker:
    name: str


@dataclass(frozen=True)
class RouteMarker:
    name: str
    # None for RequestMapping: the method comes from its `method` argument
    http_method: Optional[str]


@dataclass(frozen=True)
class SecurityMarker:
    kind: SecurityKind


AnnotationCategory = Union[ControllerMarker, RouteMarker, SecurityMarker]

_CATEGORIES: dict[str, AnnotationCategory] = {
    CONTROLLER: ControllerMarker(CONTROLLER),
    REST_CONTROLLER: ControllerMarker(REST_CONTROLLER),
    REQUEST_MAPPING: RouteMarker(REQUEST_MAPPING, None),
    GET_MAPPING: RouteMarker(GET_MAPPING, "GET"),
    POST_MAPPING: RouteMarker(POST_MAPPING, "POST"),
    PUT_MAPPING: RouteMarker(PUT_MAPPING, "PUT"),
    DELETE_MAPPING: RouteMarker(DELETE_MAPPING, "DELETE"),
    PATCH_MAPPING: RouteMarker(PATCH_MAPPING, "PATCH"),
    **{k.value: SecurityMarker(k) for k in SecurityKind},
}

CONTROLLER_NAMES = frozenset(n for n, c in _CATEGORIES.items() if isinstance(c, ControllerMarker))
ROUTE_NAMES = frozenset(n for n, c in _CATEGORIES.items() if isinstance(c, RouteMarker))
SECURITY_NAMES = frozenset(n for n, c in _CATEGORIES.items() if isinstance(c, SecurityMarker))


def classify_annotation(name: str) -> Optional[AnnotationCategory]:
    """Map an annotation's simple name to its category, or None if not recognized."""
    return _CATEGORIES.get(name)
