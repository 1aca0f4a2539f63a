"""Table rows for key command results.

Rows are plain lists of strings with the header first; rendering is left to
`cli.ui_components.print_table`. Payloads are validated before any row is
built, so a malformed record never produces a partial table.
"""

from __future__ import annotations

from typing import Any

from core.domain.models import parse_key_list, parse_key_record

LIST_HEADER = ["Name", "Created"]
DETAIL_HEADER = ["Name", "Created", "Updated", "LastUsed", "LastUsedBy"]


def key_list_rows(payload: Any) -> list[list[str]]:
    entries = parse_key_list(payload)
    return [list(LIST_HEADER)] + [[e.name, e.inserted_at] for e in entries]


def key_detail_rows(payload: Any) -> list[list[str]]:
    record = parse_key_record(payload)
    row = [
        record.name,
        record.inserted_at,
        record.updated_at,
        record.last_use.used_at,
        record.last_use.ip,
    ]
    return [list(DETAIL_HEADER), row]
