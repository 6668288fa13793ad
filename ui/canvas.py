"""
canvas.py — SVG Items Renderer
===============================
Pure rendering function: page snapshot → SVG string.

Two layouts, picked by snapshot["layout"]:
  • horizontal – a column of numbered cells (arrays, stacks, queues)
  • vertical   – a row of bars whose height is the value (sorts)

Markers ({position, size, color, text}) are drawn as arrows beside the
cell / under the bar they point at; position "temp" points at the spare
temp cell some sorts use.
"""

from html import escape
from typing import Any, Dict, List, Optional


class CanvasConfig:
    width:        int = 900
    cell_height:  int = 22
    cell_width:   int = 60
    bar_area:     int = 300
    marker_step:  int = 28
    text_color:   str = "#333333"
    empty_fill:   str = "#ffffff"
    mark_stroke:  str = "#ff5722"
    stroke:       str = "#9e9e9e"
    font_size:    int = 12


CONFIG = CanvasConfig()


def render_items(snapshot: Optional[Dict[str, Any]], config: CanvasConfig = CONFIG) -> str:
    """Returns an SVG string (empty <svg/> for a missing snapshot)."""
    if not snapshot:
        return '<svg xmlns="http://www.w3.org/2000/svg" width="0" height="0"></svg>'
    if snapshot.get("layout") == "vertical":
        return _render_bars(snapshot, config)
    return _render_cells(snapshot, config)


# ---------------------------------------------------------------------------
# Horizontal cells
# ---------------------------------------------------------------------------
def _render_cells(snapshot: Dict[str, Any], config: CanvasConfig) -> str:
    items: List[Dict[str, Any]] = snapshot.get("items", [])
    if snapshot.get("reverse"):
        items = list(reversed(items))
    rng = snapshot.get("range")
    x0 = 40
    height = max(1, len(items)) * config.cell_height + 20
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{config.width}" height="{height}">'
    ]
    rows = {}
    for row, item in enumerate(items):
        y = 10 + row * config.cell_height
        rows[item["index"]] = y
        fill = item["color"] or config.empty_fill
        stroke = config.mark_stroke if item["mark"] else config.stroke
        in_range = rng is not None and rng[0] <= item["index"] <= rng[1]
        parts.append(
            f'<text x="{x0 - 6}" y="{y + 15}" text-anchor="end" font-size="{config.font_size}" '
            f'fill="{config.text_color}">{item["index"]}</text>'
        )
        parts.append(
            f'<rect x="{x0}" y="{y}" width="{config.cell_width}" height="{config.cell_height - 2}" '
            f'fill="{fill}" stroke="{stroke}" stroke-width="{3 if item["mark"] or in_range else 1}"/>'
        )
        if item["data"] is not None:
            parts.append(
                f'<text x="{x0 + config.cell_width / 2}" y="{y + 15}" text-anchor="middle" '
                f'font-size="{config.font_size}" fill="{config.text_color}">{item["data"]}</text>'
            )
    for marker in snapshot.get("markers", []):
        y = rows.get(marker["position"])
        if y is None:
            continue
        x = x0 + config.cell_width + 6 + (marker["size"] - 1) * config.marker_step
        parts.append(_marker_text(marker, x, y + 15, config))
    parts.append("</svg>")
    return "".join(parts)


# ---------------------------------------------------------------------------
# Vertical bars
# ---------------------------------------------------------------------------
def _render_bars(snapshot: Dict[str, Any], config: CanvasConfig) -> str:
    items: List[Dict[str, Any]] = snapshot.get("items", [])
    temp = snapshot.get("temp")
    count = max(1, len(items) + (1 if temp else 0))
    slot = config.width / count
    base = config.bar_area + 10
    height = base + 3 * config.marker_step + 20
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{config.width}" height="{height}">'
    ]
    columns = {}
    for col, item in enumerate(items):
        columns[item["index"]] = col
        parts.append(_bar(item, col * slot, slot, base, config))
    if temp:
        columns["temp"] = len(items)
        parts.append(_bar(temp, len(items) * slot, slot, base, config))
    for marker in snapshot.get("markers", []):
        col = columns.get(marker["position"])
        if col is None:
            continue
        x = col * slot + slot / 2
        y = base + marker["size"] * config.marker_step
        parts.append(_marker_text(marker, x, y, config, anchor="middle"))
    parts.append("</svg>")
    return "".join(parts)


def _bar(item: Dict[str, Any], x: float, slot: float, base: int, config: CanvasConfig) -> str:
    data = item["data"] or 0
    h = data * config.bar_area / 100
    return (
        f'<rect x="{x + 1:.1f}" y="{base - h:.1f}" width="{max(1.0, slot - 2):.1f}" height="{h:.1f}" '
        f'fill="{item["color"] or config.empty_fill}" stroke="{config.stroke}"/>'
    )


def _marker_text(marker: Dict[str, Any], x: float, y: float, config: CanvasConfig, anchor: str = "start") -> str:
    label = escape(marker.get("text") or "")
    arrow = "&#8593;" if anchor == "middle" else "&#8592;"
    return (
        f'<text x="{x:.1f}" y="{y:.1f}" text-anchor="{anchor}" font-size="{config.font_size}" '
        f'fill="{escape(marker["color"])}">{arrow} {label}</text>'
    )
