"""
controls.py — UI Control Panels
================================
Every panel is a pure function that takes state and returns HTML.

Panels:
  • control_panel   – the page's action buttons + Run / Abort + options
  • console_panel   – the current step message (and the sort stats line)
  • dialog_panel    – the "Number:" modal the input gate opens
  • message_log     – the last few messages of the run
  • page_index      – cards linking to every registered page

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The active action's button reads "Next", every other button is
    disabled while a run is active, just like the applets.
"""

from html import escape
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Control Panel
# ---------------------------------------------------------------------------
def control_panel(
    actions: List[str],
    active: Optional[str] = None,
    supports_run: bool = False,
    running: bool = False,
    waiting: bool = False,
    options: Optional[Dict[str, Any]] = None,
) -> str:
    buttons = []
    for name in actions:
        is_active = name == active
        label = "Next" if is_active else name
        disabled = "disabled" if (active and not is_active) or waiting or running else ""
        buttons.append(
            f'<button class="action{" activated" if is_active else ""}" '
            f'data-action="{escape(name)}" {disabled}>{escape(label)}</button>'
        )

    if supports_run:
        run_label = "Pause" if running else "Run"
        run_disabled = "disabled" if waiting or (active and active not in ("Step", "Run")) else ""
        buttons.append(f'<button id="btn-run" {run_disabled}>{run_label}</button>')
        abort_hidden = "" if active in ("Step", "Run") else "hidden"
        buttons.append(f'<button id="btn-abort" class="{abort_hidden}">Abort</button>')

    radios = ""
    search = (options or {}).get("search")
    if search is not None:
        locked = "disabled" if active else ""
        radios = "".join(
            f'<label><input type="radio" name="search" value="{mode}" '
            f'{"checked" if mode == search else ""} {locked}>{mode.title()}</label>'
            for mode in ("linear", "binary")
        )

    return f"""
    <div class="controlpanel">
      {''.join(buttons)}
      {radios}
    </div>
    """


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------
def console_panel(message: str, stats: Optional[str] = None) -> str:
    error = " error" if message.startswith("ERROR:") else ""
    stats_html = f'<p class="message stats">{escape(stats)}</p>' if stats else ""
    return f"""
    <div class="console">
      <p class="message{error}" id="console-message">{escape(message)}</p>
      {stats_html}
    </div>
    """


# ---------------------------------------------------------------------------
# Dialog
# ---------------------------------------------------------------------------
def dialog_panel(field: Optional[Dict[str, Any]] = None) -> str:
    """Modal for the input gate; rendered open when `field` is given."""
    if field is None:
        return '<dialog id="input-dialog"></dialog>'
    attrs = "".join(
        f' {name}="{field[name]}"' for name in ("min", "max", "step") if field.get(name) is not None
    )
    return f"""
    <dialog id="input-dialog" open>
      <form method="dialog">
        <p><label>{escape(field["label"])}: <input name="{escape(field["name"])}" type="number"{attrs} autofocus></label></p>
        <button value="default">Confirm</button>
        <button value="cancel">Cancel</button>
      </form>
    </dialog>
    """


# ---------------------------------------------------------------------------
# Message log
# ---------------------------------------------------------------------------
def message_log(messages: List[str]) -> str:
    if not messages:
        return '<div class="panel log"><p class="muted">No steps yet.</p></div>'
    rows = "".join(f"<li>{escape(m)}</li>" for m in messages)
    return f'<div class="panel log"><h3>Steps</h3><ol>{rows}</ol></div>'


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------
def page_index(pages) -> str:
    cards = "".join(
        f"""
        <a class="card" href="/page/{escape(info.key)}">
          <h3>{escape(info.label)}</h3>
          <p>{escape(info.description)}</p>
          <p class="tags">{' '.join(escape(t) for t in info.tags)}</p>
        </a>
        """
        for info in pages
    )
    return f'<div class="cards">{cards}</div>'
