from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_ANNOTATION_ARGUMENT = "InvalidAnnotationArgument"
    UNEXPECTED_REQUEST_METHOD_VALUE = "UnexpectedRequestMethodValue"
    SOURCE_PARSE_ERROR = "SourceParseError"


class RouteguardError(Exception):
    pass


class ResolutionError(RouteguardError):
    """An annotation argument could not be interpreted as the expected value kind."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class ProjectLoadFailure(RouteguardError):
    """The project at the given path cannot be turned into a syntax model."""
