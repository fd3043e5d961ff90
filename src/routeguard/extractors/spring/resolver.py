from __future__ import annotations

import logging
from typing import Optional

from routeguard.domain.errors import ErrorKind, ResolutionError
from routeguard.domain.models import (
    Absent,
    AnnotationValue,
    EnumRef,
    ListValue,
    LiteralValue,
    describe_value,
)

logger = logging.getLogger(__name__)


def resolve_urls(value: AnnotationValue) -> Optional[list[str]]:
    """
    Normalize a URL-like annotation argument.

    Returns None when no URL is given (argument absent or `{}`), otherwise the
    ordered list of literal URLs. Non-literal array elements are dropped.
    """
    if isinstance(value, Absent):
        return None

    if isinstance(value, LiteralValue):
        return [value.text]

    if isinstance(value, ListValue):
        if not value.items:
            return None
        urls = []
        for item in value.items:
            if isinstance(item, LiteralValue):
                urls.append(item.text)
            else:
                logger.debug("dropping non-literal URL element %s", describe_value(item))
        return urls

    raise ResolutionError(
        ErrorKind.INVALID_ANNOTATION_ARGUMENT,
        f"The value passed to request mapping is invalid: {describe_value(value)}",
    )


def resolve_method(value: AnnotationValue) -> Optional[str]:
    """
    Resolve RequestMapping's `method` argument to a symbolic HTTP method name.

    None means "every method". Only the first array element is inspected.
    """
    if isinstance(value, Absent):
        return None

    if isinstance(value, EnumRef):
        # `method = RequestMethod.GET` is Java shorthand for a one-element array
        return value.name

    if isinstance(value, ListValue):
        if not value.items:
            return None
        first = value.items[0]
        if isinstance(first, EnumRef):
            if len(value.items) > 1:
                logger.debug(
                    "only the first request method of %s is used", describe_value(value)
                )
            return first.name
        value = first

    raise ResolutionError(
        ErrorKind.UNEXPECTED_REQUEST_METHOD_VALUE,
        f"Unexpected request method: {describe_value(value)}",
    )
