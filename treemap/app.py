import os
import threading
import time
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

from treemap.storage import ingest_csv, parse_key
from treemap.tree_map import Entry, TreeMap

app = Flask(__name__)

# TreeMap is not thread-safe; every access from a request goes through LOCK.
store = TreeMap()
LOCK = threading.Lock()

STATE: Dict[str, Any] = {"csv_path": None, "loaded": False}

DEFAULT_CSV_PATH = os.environ.get("TREEMAP_CSV_PATH", os.path.join(os.path.dirname(__file__), "..", "data", "dataset.csv"))
KEY_COLUMN = os.environ.get("TREEMAP_KEY_COLUMN", "key")
VALUE_COLUMN = os.environ.get("TREEMAP_VALUE_COLUMN") or None

NEIGHBOR_QUERIES = {
    "lower": TreeMap.lower_entry,
    "floor": TreeMap.floor_entry,
    "higher": TreeMap.higher_entry,
    "ceiling": TreeMap.ceiling_entry,
}


def ok(data=None, **extra):
    payload = {"ok": True}
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return jsonify(payload)

def err(message: str, status: int = 400, **extra):
    payload = {"ok": False, "error": message}
    payload.update(extra)
    return jsonify(payload), status

def entry_json(entry: Optional[Entry]) -> Optional[Dict[str, Any]]:
    if entry is None:
        return None
    return {"key": entry.key, "value": entry.value}

def parse_limit(raw: Optional[str], default: int = 50) -> int:
    try:
        return max(1, min(200, int(raw if raw is not None else default)))
    except ValueError:
        return default

def warm_start():
    """Ingest the configured CSV into the store at startup."""
    csv_path = (DEFAULT_CSV_PATH or "").strip()
    STATE["csv_path"] = csv_path

    if not csv_path:
        print("[warm_start] No CSV path provided.")
        return
    if not os.path.exists(csv_path):
        print(f"[warm_start] CSV not found: {csv_path}")
        return

    print(f"[warm_start] Ingesting CSV: {csv_path}")
    t0 = time.time()
    with LOCK:
        ingest_csv(store, csv_path, key_column=KEY_COLUMN, value_column=VALUE_COLUMN)
        size = len(store)
    t1 = time.time()
    STATE["loaded"] = True
    print(f"[warm_start] Map loaded: {size:,} keys in {t1 - t0:.2f}s")


@app.get("/api/status")
def api_status():
    with LOCK:
        size = len(store)
    return ok({
        "csv_path": STATE["csv_path"],
        "loaded": STATE["loaded"],
        "size": size,
    })


@app.get("/api/map/first")
def api_first():
    with LOCK:
        entry = store.first_entry()
    if entry is None:
        return err("map is empty", 404)
    return ok(entry_json(entry))

@app.get("/api/map/last")
def api_last():
    with LOCK:
        entry = store.last_entry()
    if entry is None:
        return err("map is empty", 404)
    return ok(entry_json(entry))

@app.post("/api/map/poll_first")
def api_poll_first():
    with LOCK:
        entry = store.poll_first_entry()
    if entry is None:
        return err("map is empty", 404)
    return ok(entry_json(entry))

@app.post("/api/map/poll_last")
def api_poll_last():
    with LOCK:
        entry = store.poll_last_entry()
    if entry is None:
        return err("map is empty", 404)
    return ok(entry_json(entry))


@app.get("/api/map/nearest/<kind>/<key>")
def api_nearest(kind: str, key: str):
    query = NEIGHBOR_QUERIES.get(kind)
    if query is None:
        return err(f"kind must be one of: {', '.join(NEIGHBOR_QUERIES)}")
    try:
        k = parse_key(key)
        with LOCK:
            entry = query(store, k)
    except (TypeError, ValueError) as e:
        return err(str(e))
    if entry is None:
        return err(f"no {kind} entry for {key}", 404)
    return ok(entry_json(entry))


@app.get("/api/map/range")
def api_range():
    start_raw = request.args.get("start")
    end_raw = request.args.get("end")
    limit = parse_limit(request.args.get("limit"))

    try:
        start = parse_key(start_raw) if start_raw else None
        end = parse_key(end_raw) if end_raw else None
        with LOCK:
            if start is not None and end is not None:
                view = store.sub_map(start, end)
            elif start is not None:
                view = store.tail_map(start)
            elif end is not None:
                view = store.head_map(end)
            else:
                return err("start and/or end are required: /api/map/range?start=...&end=...")
    except (TypeError, ValueError) as e:
        return err(str(e))

    rows: List[Dict[str, Any]] = []
    for entry in view.items():
        rows.append(entry_json(entry))
        if len(rows) >= limit:
            break
    return ok({"count_total": len(view), "count_returned": len(rows), "rows": rows})


@app.get("/api/map/<key>")
def api_get(key: str):
    try:
        k = parse_key(key)
    except ValueError as e:
        return err(str(e))
    with LOCK:
        found = store.contains_key(k)
        value = store.get(k)
    if not found:
        return err("key not found", 404)
    return ok({"key": k, "value": value})

@app.post("/api/map")
def api_put():
    data = request.get_json(silent=True) or {}
    if "key" not in data or "value" not in data:
        return err("body must be JSON with 'key' and 'value'")
    try:
        k = parse_key(data["key"])
        with LOCK:
            previous, replaced = store.insert(k, data["value"])
    except (TypeError, ValueError) as e:
        return err(str(e))
    return ok({"key": k, "previous": previous, "replaced": replaced})

@app.post("/api/map/delete/<key>")
def api_delete(key: str):
    try:
        k = parse_key(key)
    except ValueError as e:
        return err(str(e))
    with LOCK:
        if not store.contains_key(k):
            return err("key not found", 404)
        value = store.remove(k)
    return ok({"key": k, "value": value})


if __name__ == "__main__":
    warm_start()
    app.run(host="127.0.0.1", port=5000, debug=True, use_reloader=False)
