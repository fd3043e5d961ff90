from __future__ import annotations

import logging
from dataclasses import dataclass

from routeguard.domain.errors import ErrorKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    path: str
    message: str
    kind: ErrorKind

    def __str__(self) -> str:
        return f"[{self.path}] Error: {self.message}"


class Diagnostics:
    """Errors accumulated during one run. Any entry marks the run as failed."""

    def __init__(self) -> None:
        self.items: list[Diagnostic] = []

    def report(self, path: str, message: str, kind: ErrorKind) -> Diagnostic:
        diag = Diagnostic(path=path, message=message, kind=kind)
        logger.debug("diagnostic %s: %s", kind.value, diag)
        self.items.append(diag)
        return diag

    @property
    def failed(self) -> bool:
        return bool(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
