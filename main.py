"""
main.py — Data Structure Visualizer Flask App
==============================================
The web server that hosts the step-by-step pages.

Routes:
  GET  /                              – index of pages
  GET  /page/<key>                    – page UI
  GET  /api/page/<key>/state          – current page state
  POST /api/page/<key>/action         – control-panel button {action}
  POST /api/page/<key>/next           – advance one step
  POST /api/page/<key>/run            – toggle Run / Pause
  POST /api/page/<key>/tick           – timer poll while running
  POST /api/page/<key>/abort          – abort the active run
  POST /api/page/<key>/dialog         – modal closed {confirmed, value}
  POST /api/page/<key>/option         – page option {name, value}

State management:
  Pages hold live generators, so they cannot go into the cookie session.
  Each browser session gets an id; its pages live in process memory
  (PageSlots), one page instance (hence one StepController) per
  (session, page key).  Every request for a slot runs under that slot's
  lock, so trigger events of one viewer are handled one at a time.
  At most MAX_SESSIONS sessions (LAFORE_MAX_SESSIONS) are kept; opening
  one more evicts the least recently used.
"""

import logging
import os
import secrets
import sys
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict

from flask import Flask, abort, jsonify, render_template_string, request, session

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from pages import Page, create_page, get_page, list_pages
from ui import (
    render_items,
    control_panel,
    console_panel,
    dialog_panel,
    message_log,
    page_index,
)

logger = logging.getLogger(__name__)


app = Flask(__name__)
app.secret_key = os.environ.get("LAFORE_SECRET_KEY") or secrets.token_hex(32)
app.config["MAX_SESSIONS"] = 256
app.config.from_prefixed_env("LAFORE")


# ---------------------------------------------------------------------------
# Per-session page storage
# ---------------------------------------------------------------------------
@dataclass
class PageSlot:
    page: Page
    lock: threading.Lock = field(default_factory=threading.Lock)


_SLOTS: "OrderedDict[str, Dict[str, PageSlot]]" = OrderedDict()
_SLOTS_LOCK = threading.Lock()


def session_id() -> str:
    if "sid" not in session:
        session["sid"] = secrets.token_hex(16)
    return session["sid"]


def get_slot(key: str) -> PageSlot:
    """Page slot for this viewer, created on first use.  404 for unknown keys."""
    if get_page(key) is None:
        abort(404, description=f"Unknown page: {key}")
    sid = session_id()
    with _SLOTS_LOCK:
        pages = _SLOTS.get(sid)
        if pages is None:
            pages = _SLOTS[sid] = {}
            evict_sessions(int(app.config["MAX_SESSIONS"]))
        else:
            _SLOTS.move_to_end(sid)
        slot = pages.get(key)
        if slot is None:
            slot = pages[key] = PageSlot(create_page(key))
            logger.info("session %s opened page %s", sid[:8], key)
    return slot


def evict_sessions(limit: int) -> None:
    """Drop least recently used sessions beyond `limit`.  Caller holds _SLOTS_LOCK."""
    while len(_SLOTS) > max(1, limit):
        sid, pages = _SLOTS.popitem(last=False)
        logger.info("evicted session %s (%d page(s))", sid[:8], len(pages))


def reset_sessions() -> None:
    with _SLOTS_LOCK:
        _SLOTS.clear()


def render_state(page: Page) -> dict:
    """Page state + the HTML fragments the client swaps in."""
    state = page.to_dict()
    snapshot = state["snapshot"]
    state["html"] = {
        "controls": control_panel(
            actions=state["actions"],
            active=state["active"],
            supports_run=state["supports_run"],
            running=state["running"],
            waiting=page.controller.is_waiting,
            options=state["options"],
        ),
        "console": console_panel(state["message"], snapshot.get("stats")),
        "canvas":  render_items(snapshot),
        "dialog":  dialog_panel(state["dialog"]),
        "log":     message_log(state["log"]),
    }
    return state


def json_body() -> dict:
    return request.get_json(silent=True) or {}


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------
@app.errorhandler(404)
def not_found(err):
    return jsonify({"error": err.description}), 404


@app.errorhandler(400)
def bad_request(err):
    return jsonify({"error": err.description}), 400


@app.errorhandler(500)
def server_error(err):
    return jsonify({"error": "internal error; the run was reset"}), 500


# ---------------------------------------------------------------------------
# UI Routes
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    return render_template_string(INDEX_TEMPLATE, cards=page_index(list_pages()))


@app.route("/page/<key>")
def page_view(key):
    slot = get_slot(key)
    with slot.lock:
        state = render_state(slot.page)
    return render_template_string(PAGE_TEMPLATE, key=key, title=state["title"], html=state["html"])


# ---------------------------------------------------------------------------
# API: page state & trigger events
# ---------------------------------------------------------------------------
@app.route("/api/page/<key>/state")
def api_state(key):
    slot = get_slot(key)
    with slot.lock:
        return jsonify(render_state(slot.page))


@app.route("/api/page/<key>/action", methods=["POST"])
def api_action(key):
    name = json_body().get("action", "")
    slot = get_slot(key)
    with slot.lock:
        if name not in slot.page.actions():
            abort(400, description=f"Unknown action: {name}")
        accepted = slot.page.on_action_clicked(name)
        return jsonify({"accepted": accepted, **render_state(slot.page)})


@app.route("/api/page/<key>/next", methods=["POST"])
def api_next(key):
    slot = get_slot(key)
    with slot.lock:
        accepted = slot.page.on_next_clicked()
        return jsonify({"accepted": accepted, **render_state(slot.page)})


@app.route("/api/page/<key>/run", methods=["POST"])
def api_run(key):
    slot = get_slot(key)
    with slot.lock:
        accepted = slot.page.on_run_toggled()
        return jsonify({"accepted": accepted, **render_state(slot.page)})


@app.route("/api/page/<key>/tick", methods=["POST"])
def api_tick(key):
    slot = get_slot(key)
    with slot.lock:
        stepped = slot.page.on_tick()
        return jsonify({"stepped": stepped, **render_state(slot.page)})


@app.route("/api/page/<key>/abort", methods=["POST"])
def api_abort(key):
    slot = get_slot(key)
    with slot.lock:
        accepted = slot.page.on_abort_clicked()
        return jsonify({"accepted": accepted, **render_state(slot.page)})


@app.route("/api/page/<key>/dialog", methods=["POST"])
def api_dialog(key):
    data = json_body()
    slot = get_slot(key)
    with slot.lock:
        try:
            accepted = slot.page.on_dialog_closed(bool(data.get("confirmed")), data.get("value"))
        except ValueError as e:
            abort(400, description=str(e))
        return jsonify({"accepted": accepted, **render_state(slot.page)})


@app.route("/api/page/<key>/option", methods=["POST"])
def api_option(key):
    data = json_body()
    slot = get_slot(key)
    with slot.lock:
        try:
            accepted = slot.page.set_option(data.get("name", ""), data.get("value"))
        except ValueError as e:
            abort(400, description=str(e))
        return jsonify({"accepted": accepted, **render_state(slot.page)})


# ---------------------------------------------------------------------------
# HTML Templates
# ---------------------------------------------------------------------------
BASE_STYLE = """
  <style>
    * { box-sizing: border-box; }
    body { font-family: sans-serif; margin: 24px; color: #333; }
    a { color: inherit; }
    .cards { display: grid; grid-template-columns: repeat(auto-fill, minmax(240px, 1fr)); gap: 16px; }
    .card { display: block; border: 1px solid #ddd; border-radius: 8px; padding: 16px; text-decoration: none; }
    .card:hover { border-color: #2196f3; }
    .tags { color: #999; font-size: 12px; }
    .controlpanel { display: flex; gap: 8px; align-items: center; margin-bottom: 8px; }
    .controlpanel button.activated { background: #2196f3; color: #fff; }
    .hidden { display: none; }
    .message { padding: 10px; margin: 10px 0; background: aliceblue; font-family: monospace; }
    .message.error { background: #ffebee; }
    .message.stats { background: #f5f5f5; }
    #layout { display: flex; gap: 24px; }
    .log { min-width: 280px; font-size: 13px; }
    .muted { color: #999; }
  </style>
"""

INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>Data Structure Visualizer</title>
""" + BASE_STYLE + """
</head>
<body>
  <h1>Data Structures &amp; Algorithms</h1>
  {{ cards|safe }}
</body>
</html>
"""

PAGE_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{{ title }}</title>
""" + BASE_STYLE + """
</head>
<body>
  <p><a href="/">&larr; all pages</a></p>
  <h4>{{ title }}</h4>
  <div id="controls">{{ html.controls|safe }}</div>
  <div id="console">{{ html.console|safe }}</div>
  <div id="layout">
    <div id="canvas">{{ html.canvas|safe }}</div>
    <div id="log">{{ html.log|safe }}</div>
  </div>
  <div id="dialog">{{ html.dialog|safe }}</div>
  <script>
    const base = "/api/page/{{ key }}";
    let timer = null;

    async function post(path, body) {
      const res = await fetch(base + path, {
        method: "POST",
        headers: {"Content-Type": "application/json"},
        body: JSON.stringify(body || {}),
      });
      const data = await res.json();
      if (!res.ok) { alert(data.error); return; }
      apply(data);
    }

    function apply(state) {
      for (const id of ["controls", "console", "canvas", "dialog", "log"]) {
        document.getElementById(id).innerHTML = state.html[id];
      }
      if (state.running && !timer) {
        timer = setInterval(() => post("/tick"), 20);
      } else if (!state.running && timer) {
        clearInterval(timer);
        timer = null;
      }
    }

    document.addEventListener("click", (e) => {
      const btn = e.target.closest("button");
      if (!btn || btn.closest("dialog")) return;
      if (btn.dataset.action) post("/action", {action: btn.dataset.action});
      else if (btn.id === "btn-run") post("/run");
      else if (btn.id === "btn-abort") post("/abort");
    });

    document.addEventListener("change", (e) => {
      if (e.target.name === "search") post("/option", {name: "search", value: e.target.value});
    });

    document.addEventListener("submit", (e) => {
      const form = e.target;
      if (!form.closest("dialog")) return;
      e.preventDefault();
      const confirmed = e.submitter && e.submitter.value === "default";
      post("/dialog", {confirmed, value: form.elements.number ? form.elements.number.value : null});
    });
  </script>
</body>
</html>
"""


if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("LAFORE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(debug=app.config.get("DEBUG", False), port=int(os.environ.get("PORT", 5000)))
