"""
Plain-text report rendering — aligned tables for terminal output.
"""
from __future__ import annotations

import datetime as dt

import pandas as pd

from billing_analytics.config import DATE_FORMAT, NULL_DISPLAY
from billing_analytics.excel.writer import ColSpec

RIGHT_ALIGNED = ("id", "number", "currency", "percent")
BANNER_WIDTH = 70
ELLIPSIS = "…"


def format_value(value, col_type: str = "text") -> str:
    """Render one cell. Nulls show as NULL, like a SQL client."""
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return NULL_DISPLAY
    if col_type == "id":
        return str(int(value))
    if col_type == "number":
        return f"{int(value):,}"
    if col_type == "currency":
        return f"{float(value):,.2f}"
    if col_type == "percent":
        return f"{float(value):.1f}%"
    if col_type == "date" and isinstance(value, (dt.date, dt.datetime)):
        return value.strftime(DATE_FORMAT)
    return str(value)


def _clip(text: str, max_width: int | None) -> str:
    """Cut text to max_width, marking the cut with a trailing ellipsis."""
    if max_width is None or len(text) <= max_width:
        return text
    return text[:max_width - 1] + ELLIPSIS


def render_table(
    columns: list[ColSpec],
    data: list[dict] | pd.DataFrame,
    max_width: int | None = 40,
) -> str:
    """Aligned text table: header, dash rule, rows, row-count footer."""
    rows = data.to_dict("records") if isinstance(data, pd.DataFrame) else data

    cells = [
        [_clip(format_value(row.get(key), col_type), max_width) for key, col_type, _ in columns]
        for row in rows
    ]
    labels = [label for _, _, label in columns]
    widths = [
        max([len(labels[i])] + [len(line[i]) for line in cells])
        for i in range(len(columns))
    ]

    def _line(values: list[str]) -> str:
        parts = []
        for i, (_, col_type, _) in enumerate(columns):
            if col_type in RIGHT_ALIGNED:
                parts.append(values[i].rjust(widths[i]))
            else:
                parts.append(values[i].ljust(widths[i]))
        return "  ".join(parts).rstrip()

    lines = [_line(labels), "  ".join("-" * w for w in widths)]
    lines.extend(_line(line) for line in cells)
    lines.append(f"({len(cells)} row{'' if len(cells) == 1 else 's'})")
    return "\n".join(lines)


def render_report(title: str, subtitle: str, sections: list[tuple[str, str]]) -> str:
    """Banner plus titled, pre-rendered sections."""
    out = [
        "=" * BANNER_WIDTH,
        f"  {title.upper()}",
        f"  {subtitle}",
        "=" * BANNER_WIDTH,
    ]
    for heading, body in sections:
        out.extend(["", heading, body])
    return "\n".join(out) + "\n"
