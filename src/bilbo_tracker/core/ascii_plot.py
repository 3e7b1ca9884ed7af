"""
ASCII plotting for BILBO progress visualization.

Creates terminal-friendly charts from ProgressData and weekly counts.
"""

from datetime import date, datetime, timedelta

from .models import ProgressData
from .statistics import week_start


def create_weight_progress_plot(
    data: ProgressData,
    width: int = 60,
    height: int = 16,
    exercise_name: str = "",
    unit: str = "kg",
    scale: float = 1.0,
) -> str:
    """
    Create an ASCII plot of the weight used per session over time.

    Args:
        data: Chronological progress series
        width: Plot width in characters
        height: Plot height in lines
        exercise_name: Display name shown in the chart title
        unit: Unit label for the y-axis
        scale: Multiplier applied to kg values (unit conversion)

    Returns:
        ASCII art string
    """
    if not data.weight:
        return "No sessions recorded yet. Log a session to see progress."

    points = [(when, kg * scale) for when, kg in data.weight]
    reps_by_time = dict(data.reps)

    min_date = points[0][0]
    max_date = points[-1][0]
    date_range = (max_date - min_date).total_seconds()
    if date_range <= 0:
        date_range = 1.0

    y_min = min(v for _, v in points)
    y_max = max(v for _, v in points)
    # Pad so a flat line sits mid-plot
    pad = max(1.0, (y_max - y_min) * 0.1)
    y_min = max(0.0, y_min - pad)
    y_max = y_max + pad
    y_range = y_max - y_min

    plot_width = width - 8  # Leave room for y-axis labels
    plot_height = height - 3  # Leave room for title and x-axis

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    plot_points: list[tuple[int, int, datetime]] = []
    for when, value in points:
        x = int(((when - min_date).total_seconds() / date_range) * (plot_width - 1))
        y = int(((value - y_min) / y_range) * (plot_height - 1))
        y = plot_height - 1 - y  # Flip y-axis
        plot_points.append((x, y, when))

    # Horizontal connectors between consecutive sessions at the earlier level
    for (x1, y1, _), (x2, _, _) in zip(plot_points, plot_points[1:]):
        for x in range(x1 + 1, x2):
            if grid[y1][x] == " ":
                grid[y1][x] = "─"

    for x, y, _ in plot_points:
        grid[y][x] = "●"

    lines = []
    title = "Training Weight Progress"
    if exercise_name:
        title += f" ({exercise_name})"
    lines.append(title)
    lines.append("─" * width)

    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * y_range if plot_height > 1 else y_max
        row_str = "".join(row)

        # Reps labels next to data points
        for x, py, when in plot_points:
            if py != i:
                continue
            label_text = f"({reps_by_time.get(when, 0)})"
            label_pos = x + 2
            if label_pos + len(label_text) < plot_width:
                row_list = list(row_str)
                for j, c in enumerate(label_text):
                    if row_list[label_pos + j] in (" ", "─"):
                        row_list[label_pos + j] = c
                row_str = "".join(row_list)

        lines.append(f"{y_val:6.1f} ┤" + row_str)

    lines.append("─" * width)

    label_line = [" "] * plot_width
    mid_date = min_date + (max_date - min_date) / 2
    for x_pos, when in ((0, min_date), (plot_width // 2, mid_date), (plot_width - 7, max_date)):
        date_str = when.strftime("%b %d")
        for i, c in enumerate(date_str):
            if 0 <= x_pos + i < plot_width:
                label_line[x_pos + i] = c
    lines.append("        " + "".join(label_line))
    lines.append(f"● weight ({unit})   (n) reps completed")

    return "\n".join(lines)


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(l) for l in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        bar = "█" * bar_len
        lines.append(f"{label:>{max_label_len}} │{bar} {value:g}")

    return "\n".join(lines)


def create_weekly_sessions_chart(
    by_week: dict[date, int],
    weeks: int = 4,
    today: date | None = None,
) -> str:
    """
    Create a chart of BILBO sessions per ISO week, newest week last.

    Args:
        by_week: Week-start (Monday) → session count
        weeks: Number of weeks to show, ending with the current week
        today: Reference day (default: date.today())

    Returns:
        ASCII chart string
    """
    if not by_week:
        return "No training history."

    if today is None:
        today = date.today()
    current = week_start(today)

    labels = []
    values = []
    for i in range(weeks - 1, -1, -1):
        start = current - timedelta(weeks=i)
        labels.append(f"Week of {start.strftime('%b %d')}")
        values.append(float(by_week.get(start, 0)))

    return create_simple_bar_chart(labels, values, title="Sessions per Week")
