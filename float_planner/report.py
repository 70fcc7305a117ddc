"""Markdown rendering of float plans and gauge condition listings.

Example::

    from float_planner.report import render_plan

    print(render_plan(plan))

    # # Current River: Akers Ferry to Pulltite
    #
    # | | |
    # | --- | --- |
    # | Distance | 12.0 mi downstream |
    # | Float time | 4h 48m (canoe, 2.5 mph) |
    # ...
"""

from __future__ import annotations

from typing import Sequence

from float_planner.formatting import fmt, fmt_age, fmt_reading
from float_planner.models import FloatPlan
from float_planner.planner import GaugeCondition
from float_planner.thresholds import short_label


def md_table(
    headers: Sequence[str],
    rows: Sequence[Sequence],
    alignments: Sequence[str] | None = None,
) -> str:
    """Build a Markdown table from headers and rows.

    Args:
        headers: Column header strings.
        rows: Row cell values; non-strings are converted with ``str()``.
        alignments: Optional ``'l'``/``'r'``/``'c'`` code per column.

    Returns:
        A Markdown table string, or ``""`` if *rows* is empty.
    """
    if not rows:
        return ""

    n_cols = len(headers)
    markers = {"r": "---:", "c": ":---:"}
    seps = [markers.get(a, "---") for a in (alignments or ["l"] * n_cols)]

    lines = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join(seps) + " |",
    ]
    for row in rows:
        cells = [str(c) for c in row][:n_cols]
        cells += [""] * (n_cols - len(cells))
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines)


def render_plan(plan: FloatPlan) -> str:
    """Render a float plan as a Markdown summary."""
    cond = plan.condition
    vessel = plan.vessel.name or plan.vessel.slug

    lines = [f"# {plan.river.name}: {plan.put_in.name} to {plan.take_out.name}", ""]

    summary = [
        ["Put-in", f"{plan.put_in.name} (mile {fmt(plan.put_in.river_mile, 1)})"],
        ["Take-out", f"{plan.take_out.name} (mile {fmt(plan.take_out.river_mile, 1)})"],
        ["Distance", f"{plan.distance.formatted} {plan.direction}"],
        [
            "Float time",
            f"{plan.float_time.formatted} ({vessel}, {fmt(plan.float_time.speed_mph, 1)} mph)",
        ],
        ["Condition", cond.label],
    ]
    if cond.gauge_name:
        summary.append(["Gauge", cond.gauge_name])
        summary.append([
            "Reading",
            f"{fmt_reading(cond.gauge_height_ft, 'ft')} / {fmt_reading(cond.discharge_cfs, 'cfs')}",
        ])
        if cond.reading_age_hours is not None:
            summary.append(["Updated", fmt_age(cond.reading_age_hours)])
    lines.append(md_table(["", ""], summary))

    if plan.hazards:
        lines += ["", "## Hazards", ""]
        lines.append(md_table(
            ["Mile", "Hazard", "Type", "Severity"],
            [[fmt(h.river_mile, 1), h.name, h.type, h.severity] for h in plan.hazards],
            alignments=["r", "l", "l", "l"],
        ))

    if plan.warnings:
        lines += ["", "## Warnings", ""]
        lines += [f"- {w}" for w in plan.warnings]

    if cond.source_url:
        lines += ["", f"Source: {cond.source_url}"]

    return "\n".join(lines) + "\n"


def render_conditions(rows: Sequence[GaugeCondition]) -> str:
    """Render a gauge condition listing as a Markdown table."""
    if not rows:
        return "No gauges found.\n"
    table = md_table(
        ["River", "Gauge", "Condition", "Height", "Discharge", "Updated"],
        [
            [
                r.river_name,
                r.gauge_name + (" *" if r.is_primary else ""),
                short_label(r.code),
                fmt_reading(r.gauge_height_ft, "ft"),
                fmt_reading(r.discharge_cfs, "cfs"),
                fmt_age(r.reading_age_hours),
            ]
            for r in rows
        ],
        alignments=["l", "l", "l", "r", "r", "r"],
    )
    return table + "\n\n\\* primary gauge\n"
