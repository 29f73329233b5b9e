"""
Rich renderables for the trend chart and the history table.

Shared by the Textual widgets and the command line.
"""

import math
from collections.abc import Sequence

from rich.table import Table
from rich.text import Text

from sleeplog.services.projections import HistoryItem, TrendPoint, format_hours

CHART_COLUMN_WIDTH = 6
CHART_AXIS_WIDTH = 5
CHART_EMPTY_MESSAGE = "No data to chart yet."
HISTORY_EMPTY_MESSAGE = "No entries yet."
SHORT_ID_LENGTH = 8


def chart_capacity(width: int) -> int:
    """How many columns fit in `width` cells next to the axis."""
    return max(1, (width - CHART_AXIS_WIDTH) // CHART_COLUMN_WIDTH)


def render_trend_chart(
    points: Sequence[TrendPoint],
    height: int = 8,
    max_points: int | None = None,
) -> Text:
    """
    Column chart of hours per night, oldest on the left.

    Args:
        points: Chart points, already in date order
        height: Rows of bar area
        max_points: Keep only the most recent points when set

    Returns:
        Renderable text; a placeholder line when there are no points
    """
    if not points:
        return Text(CHART_EMPTY_MESSAGE, style="dim")
    if max_points is not None:
        points = points[-max_points:]

    top = max(1, math.ceil(max(point.hours for point in points)))
    step = top / height
    bar = "█" * (CHART_COLUMN_WIDTH - 2)

    text = Text(no_wrap=True)
    for row in range(height, 0, -1):
        threshold = step * row - step / 2
        label = format_hours(top) if row == height else ""
        text.append(f"{label:>3} │", style="dim")
        for point in points:
            if point.hours >= threshold:
                text.append(f" {bar} ", style="magenta")
            else:
                text.append(" " * CHART_COLUMN_WIDTH)
        text.append("\n")

    text.append("  0 └" + "─" * (CHART_COLUMN_WIDTH * len(points)) + "\n", style="dim")
    text.append(" " * CHART_AXIS_WIDTH)
    for point in points:
        text.append(f"{format_hours(point.hours):^{CHART_COLUMN_WIDTH}}", style="bold")
    text.append("\n" + " " * CHART_AXIS_WIDTH)
    for point in points:
        text.append(f"{point.label:^{CHART_COLUMN_WIDTH}}", style="dim")
    return text


def render_history_table(items: Sequence[HistoryItem]) -> Table | Text:
    """History rows as a table, newest first; a placeholder when empty."""
    if not items:
        return Text(HISTORY_EMPTY_MESSAGE, style="dim")

    table = Table(title="Sleep History", title_justify="left")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Quality", no_wrap=True)
    table.add_column("Date", no_wrap=True)
    table.add_column("Hours", justify="right")
    table.add_column("Note")
    for item in items:
        table.add_row(
            item.entry_id[:SHORT_ID_LENGTH],
            item.quality_label,
            item.date_label,
            format_hours(item.hours),
            f"💭 {item.note}" if item.note else "",
        )
    return table
