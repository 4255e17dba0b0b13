#!/usr/bin/env python3
"""
Board Infinity Task Board Server
--------------------------------
Serves the task board page and a JSON API backed by the document store.
The page stays live through a Server-Sent Events stream that pushes the
re-rendered columns on every store change.

Usage:
    python taskboard_server.py
    python taskboard_server.py --host 0.0.0.0 --port 3000 --db /tmp/taskboard.db

Access:
    http://localhost:3000

API:
    GET    /                     → Task board (HTML)
    GET    /api/tasks            → JSON: { tasks, columns, count }
    POST   /api/tasks            → JSON/form body: { title, description, date, status, priority }
                                   Returns: { id } (201) or { error, missing } (400)
    PATCH  /api/tasks/<id>       → JSON body: { status }
    POST   /api/tasks/<id>/edit  → Edit placeholder (202)
    DELETE /api/tasks/<id>       → { deleted }
    GET    /api/stream           → text/event-stream of "snapshot" events (columns HTML)
    GET    /health               → { status, db, collection }
"""

import argparse
import logging
import os
import queue
import re
import sys
from typing import Optional

from flask import Flask, Response, jsonify, render_template, request, stream_with_context

from pkg.taskboard.board import TaskBoard, partition
from pkg.taskboard.config import BoardConfig
from pkg.taskboard.form import CreateTaskForm
from pkg.taskboard.render import build_columns
from pkg.taskboard.schema import DEFAULT_PRIORITY, PRIORITIES, TaskStatus
from pkg.taskboard.store import DocumentNotFound, DocumentStore, StoreError

STATUSES = [s.value for s in TaskStatus]


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [taskboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


# Only CR, LF and CRLF end a line in an event stream.
_SSE_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _sse(event: str, payload: str) -> str:
    """Format one Server-Sent Events message."""
    lines = _SSE_LINE_BREAK.split(payload)
    return f"event: {event}\n" + "".join(f"data: {line}\n" for line in lines) + "\n"


def _request_data() -> Optional[dict]:
    """Request body as a dict; None when a JSON body is not an object."""
    if request.is_json:
        data = request.get_json(force=True, silent=True)
        if data is None:
            return {}
        return data if isinstance(data, dict) else None
    return request.form.to_dict()


def _not_an_object():
    return jsonify({"error": "expected a JSON object"}), 400


def create_app(config: Optional[BoardConfig] = None, store: Optional[DocumentStore] = None) -> Flask:
    """Build the Flask app around one document store."""
    config = config or BoardConfig.load()
    store = store or DocumentStore(config.db_path)

    app = Flask(__name__)
    app.config["TASKBOARD"] = config
    app.extensions["taskboard_store"] = store

    def board(**kwargs) -> TaskBoard:
        return TaskBoard(store, config.collection, **kwargs)

    # ── Errors ───────────────────────────────────────────────────────────────

    @app.errorhandler(DocumentNotFound)
    def handle_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(StoreError)
    def handle_store_error(e):
        app.logger.error(f"Store error: {e}")
        return jsonify({"error": str(e)}), 500

    # ── Routes ───────────────────────────────────────────────────────────────

    @app.route("/")
    def index():
        with board() as view:
            columns = build_columns(view.columns())
        return render_template(
            "taskboard.html",
            cfg=config,
            columns=columns,
            statuses=STATUSES,
            priorities=PRIORITIES,
            default_status=TaskStatus.TODO.value,
            default_priority=DEFAULT_PRIORITY,
        )

    @app.route("/api/tasks", methods=["GET"])
    def api_tasks():
        with board() as view:
            tasks = list(view.tasks)
        return jsonify({
            "tasks": [t.to_dict() for t in tasks],
            "columns": {
                status.value: [t.to_dict() for t in column]
                for status, column in partition(tasks).items()
            },
            "count": len(tasks),
        })

    @app.route("/api/tasks", methods=["POST"])
    def api_create_task():
        data = _request_data()
        if data is None:
            return _not_an_object()
        view = board()
        created = []
        form = CreateTaskForm.from_mapping(
            data,
            on_submit=lambda fields: created.append(view.create(fields)),
            on_close=view.close_create_modal,
        )
        if not form.submit():
            return jsonify({
                "error": "required fields missing or invalid",
                "missing": form.missing_fields(),
            }), 400
        return jsonify({"id": created[0]}), 201

    @app.route("/api/tasks/<task_id>", methods=["PATCH"])
    def api_change_status(task_id):
        data = _request_data()
        if data is None:
            return _not_an_object()
        status = str(data.get("status", "")).strip()
        if not TaskStatus.is_valid(status):
            return jsonify({"error": f"Invalid status: {status}", "allowed": STATUSES}), 400
        board().change_status(task_id, TaskStatus(status))
        return jsonify({"id": task_id, "status": status})

    @app.route("/api/tasks/<task_id>/edit", methods=["POST"])
    def api_edit_task(task_id):
        board().edit(task_id)
        return jsonify({"id": task_id, "edit": "not implemented"}), 202

    @app.route("/api/tasks/<task_id>", methods=["DELETE"])
    def api_delete_task(task_id):
        board().delete(task_id)
        return jsonify({"deleted": task_id})

    @app.route("/api/stream")
    def api_stream():
        updates: "queue.Queue" = queue.Queue()
        live = board(on_change=updates.put)
        keepalive = config.stream_keepalive_secs

        def events():
            with live:
                while True:
                    try:
                        tasks = updates.get(timeout=keepalive)
                    except queue.Empty:
                        yield ": keepalive\n\n"
                        continue
                    # Only the latest snapshot matters
                    while not updates.empty():
                        tasks = updates.get_nowait()
                    html = render_template(
                        "_columns.html",
                        columns=build_columns(partition(tasks)),
                        statuses=STATUSES,
                    )
                    yield _sse("snapshot", html)

        return Response(
            stream_with_context(events()),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "db": store.db_path, "collection": config.collection})

    return app


# ── Main ─────────────────────────────────────────────────────────────────────

def main():
    parser = argparse.ArgumentParser(description="Board Infinity Task Board Server")
    parser.add_argument("--host", help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int)
    parser.add_argument("--db", help="Path to taskboard.db (overrides TASKBOARD_DB env var)")
    parser.add_argument("--config", help="Path to taskboard.yaml")
    args = parser.parse_args()

    if args.db:
        os.environ["TASKBOARD_DB"] = args.db

    config = BoardConfig.load(args.config)
    host = args.host or config.host
    port = args.port or config.port
    configure_logging(config.log_level)

    logger = logging.getLogger("taskboard")
    logger.info(f"Serving {config.title} on http://{host}:{port} (db: {config.db_path})")

    app = create_app(config)
    app.run(host=host, port=port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
