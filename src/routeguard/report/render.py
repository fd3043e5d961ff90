from __future__ import annotations

import json
from typing import Iterable

from rich.table import Table
from rich.text import Text

from routeguard.domain.models import RouteRecord

FORMATS = ("lines", "table", "json")


def filter_unguarded(records: Iterable[RouteRecord]) -> list[RouteRecord]:
    return [r for r in records if not r.guarded]


def render_lines(records: Iterable[RouteRecord]) -> str:
    return "\n".join(repr(r) for r in records)


def render_json(records: Iterable[RouteRecord]) -> str:
    return json.dumps([r.model_dump() for r in records], indent=2)


def render_table(records: Iterable[RouteRecord]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("URL")
    table.add_column("PRE-AUTHORIZE")
    table.add_column("POST-AUTHORIZE")
    table.add_column("PRE-FILTER")
    table.add_column("POST-FILTER")

    # user text, not markup
    for r in records:
        if not r.guarded:
            table.add_row(r.http_method, Text(r.url), Text("UNGUARDED", style="bold red"), "", "", "")
            continue
        table.add_row(
            r.http_method,
            Text(r.url),
            Text(r.pre_authorization),
            Text(r.post_authorization),
            Text(r.pre_filter),
            Text(r.post_filter),
        )
    return table
