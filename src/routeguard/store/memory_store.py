from __future__ import annotations

from typing import Iterator, Optional

from routeguard.domain.models import RouteRecord


class RouteStore:
    """In-memory route store keyed by `url|httpMethod`. Last insert wins."""

    def __init__(self) -> None:
        self._routes: dict[str, RouteRecord] = {}

    def insert(self, key: str, record: RouteRecord) -> None:
        self._routes[key] = record

    def add(self, record: RouteRecord) -> str:
        self.insert(record.key, record)
        return record.key

    def get(self, key: str) -> Optional[RouteRecord]:
        return self._routes.get(key)

    def remove(self, key: str) -> Optional[RouteRecord]:
        return self._routes.pop(key, None)

    def list_all(self) -> list[RouteRecord]:
        return list(self._routes.values())

    def keys(self) -> list[str]:
        return list(self._routes)

    def snapshot(self) -> dict[str, RouteRecord]:
        return dict(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, key: object) -> bool:
        return key in self._routes

    def __iter__(self) -> Iterator[RouteRecord]:
        return iter(self.list_all())
