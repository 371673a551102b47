from __future__ import annotations

import json
from collections.abc import Iterable

from .models import GONE, AheadBehindData

BRANCH_WIDTH = 40
REMOTE_WIDTH = 40
COUNT_WIDTH = 8
ANSI_RESET = "\x1b[0m"
ANSI_GONE = "\x1b[38;5;245m"


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        if width <= 3:
            return text[:width]
        return f"{text[: width - 3]}..."
    return text.ljust(width)


def _format_count(count: str) -> str:
    if count == GONE:
        return GONE
    return count or "?"


def format_status(record: AheadBehindData) -> str:
    if record.is_gone:
        return GONE
    return f"↑{_format_count(record.ahead_count)} ↓{_format_count(record.behind_count)}"


def format_table_columns(record: AheadBehindData) -> list[str]:
    return [
        _fit(record.branch, BRANCH_WIDTH),
        _fit(record.remote_ref, REMOTE_WIDTH),
        _fit(_format_count(record.ahead_count), COUNT_WIDTH),
        _fit(_format_count(record.behind_count), COUNT_WIDTH),
    ]


def _colorize(text: str, color: str | None) -> str:
    if not color:
        return text
    return f"{color}{text}{ANSI_RESET}"


def render_table_lines(records: Iterable[AheadBehindData], color: bool = False) -> list[str]:
    lines = [
        " ".join(
            [
                _fit("BRANCH", BRANCH_WIDTH),
                _fit("REMOTE", REMOTE_WIDTH),
                _fit("AHEAD", COUNT_WIDTH),
                _fit("BEHIND", COUNT_WIDTH),
            ]
        ),
        "-" * (BRANCH_WIDTH + REMOTE_WIDTH + 2 * COUNT_WIDTH + 3),
    ]
    for record in sorted(records, key=lambda r: r.branch):
        row = " ".join(format_table_columns(record)).rstrip()
        lines.append(_colorize(row, ANSI_GONE if color and record.is_gone else None))
    return lines


def render_table(records: Iterable[AheadBehindData], color: bool = False) -> str:
    return "\n".join(render_table_lines(records, color=color))


def render_json(records: Iterable[AheadBehindData]) -> str:
    data = {
        record.branch: {
            "remote_ref": record.remote_ref,
            "ahead": record.ahead_count,
            "behind": record.behind_count,
        }
        for record in sorted(records, key=lambda r: r.branch)
    }
    return json.dumps(data, indent=2)
