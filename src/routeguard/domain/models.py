from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, ConfigDict

# order matters: RequestMapping without a method expands in this order
DEFAULT_HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")


def route_key(url: str, http_method: str) -> str:
    return f"{url}|{http_method}"


class RouteRecord(BaseModel):
    """One concrete (url, http method) pair and the guard expressions on it."""

    model_config = ConfigDict(frozen=True)

    url: str
    http_method: str
    pre_authorization: str = ""
    post_authorization: str = ""
    pre_filter: str = ""
    post_filter: str = ""

    @property
    def key(self) -> str:
        return route_key(self.url, self.http_method)

    @property
    def guarded(self) -> bool:
        return any(
            (self.pre_authorization, self.post_authorization, self.pre_filter, self.post_filter)
        )

    def with_url(self, url: str) -> "RouteRecord":
        return self.model_copy(update={"url": url})


# ----------------------------
# Annotation argument values
# ----------------------------


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class LiteralValue:
    text: str


@dataclass(frozen=True)
class ListValue:
    items: tuple["AnnotationValue", ...] = ()


@dataclass(frozen=True)
class EnumRef:
    name: str
    qualifier: str = ""

    @property
    def text(self) -> str:
        return f"{self.qualifier}.{self.name}" if self.qualifier else self.name


@dataclass(frozen=True)
class Expression:
    """Any argument shape that is not a literal, an array or a constant reference."""

    text: str


AnnotationValue = Union[Absent, LiteralValue, ListValue, EnumRef, Expression]

ABSENT = Absent()


def describe_value(value: AnnotationValue) -> str:
    if isinstance(value, Absent):
        return "<absent>"
    if isinstance(value, LiteralValue):
        return repr(value.text)
    if isinstance(value, ListValue):
        return "{" + ", ".join(describe_value(v) for v in value.items) + "}"
    return value.text
