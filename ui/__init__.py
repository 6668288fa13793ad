"""
ui/
---
Presentation layer.

    from ui import render_items
    from ui import control_panel, console_panel, dialog_panel, …
"""

from ui.canvas import render_items, CanvasConfig

from ui.controls import (
    control_panel,
    console_panel,
    dialog_panel,
    message_log,
    page_index,
)

__all__ = [
    "render_items",
    "CanvasConfig",
    "control_panel",
    "console_panel",
    "dialog_panel",
    "message_log",
    "page_index",
]
