"""
app.py - Flask job runner for the GDPR compliance scanner.

Starts scans in child processes and streams their progress to clients
with Server-Sent Events (SSE).  Results are kept in memory only, and are
forgotten RESULT_TTL seconds after the scan ends.

Run:  python app.py
API:  POST /api/scan                  {"url": "...", "timeout": 60}  -> {"scan_id": "..."}
      GET  /api/scan/<id>/stream      SSE: status, complete, scan_error, done
      GET  /api/scan/<id>/result      202 while running, then the result JSON
"""

import json
import logging
import multiprocessing
import os
import threading
import time
import uuid
from queue import Empty, Queue

from flask import Flask, Response, jsonify, request

import scanner
from models import ScanRequest, ScanResult

logger = logging.getLogger(__name__)

# Hard kill after this many seconds, same as the CLI.
MAX_SCAN_TIME = scanner.MAX_SCAN_TIME

# Finished scans are forgotten after this many seconds.
RESULT_TTL = 600

app = Flask(__name__)

# ────────────────────────────────────────────────────────────────────
# In-memory store for active / recent scans.
# Key: scan_id  Value: { queue, thread, result, error, done }
# ────────────────────────────────────────────────────────────────────
active_scans = {}


def _drain(mp_status_queue, q):
    """Move every pending status update from the subprocess to the SSE queue."""
    while True:
        try:
            status = mp_status_queue.get_nowait()
        except Empty:
            return
        q.put({"event": "status", "data": status})


def _run_scan(scan_id, scan_request):
    """Background thread: runs the scan in a SEPARATE PROCESS with a hard kill timeout."""
    scan = active_scans[scan_id]
    q = scan["queue"]
    try:
        mp_result_queue = multiprocessing.Queue()
        mp_status_queue = multiprocessing.Queue()

        proc = multiprocessing.Process(
            target=scanner._scan_in_process,
            args=(scan_request, mp_result_queue, mp_status_queue),
        )
        proc.start()
        start_time = time.time()

        result = None
        while result is None:
            _drain(mp_status_queue, q)
            try:
                result = mp_result_queue.get(timeout=0.2)
                break
            except Empty:
                pass

            if not proc.is_alive():
                break
            if time.time() - start_time > MAX_SCAN_TIME:
                proc.kill()
                proc.join()
                message = f"Scan timed out after {MAX_SCAN_TIME}s"
                logger.warning("%s: %s", scan_request.url, message)
                scan["result"] = scanner.result_payload(
                    ScanResult.failed(scan_request.url, message, duration=float(MAX_SCAN_TIME))
                )
                scan["error"] = message
                q.put({"event": "scan_error", "data": {"message": message}})
                return

        proc.join(timeout=5)
        _drain(mp_status_queue, q)

        # The child may have put its result and exited between the last
        # get() and the is_alive() check.
        if result is None:
            try:
                result = mp_result_queue.get(timeout=5)
            except Empty:
                pass

        if result is None:
            result = scanner.result_payload(ScanResult.failed(
                scan_request.url, "Scan process ended without returning results",
            ))

        scan["result"] = result
        if result["success"]:
            q.put({"event": "complete", "data": result})
        else:
            scan["error"] = result["error"]
            q.put({"event": "scan_error", "data": {"message": result["error"]}})

    except Exception as e:
        logger.exception("Scan runner for %s crashed", scan_request.url)
        scan["error"] = str(e)
        q.put({"event": "scan_error", "data": {"message": str(e)}})

    finally:
        scan["done"] = True
        q.put(None)  # sentinel, ends the SSE stream
        _schedule_eviction(scan_id)


def _schedule_eviction(scan_id):
    """Forget a finished scan after RESULT_TTL seconds, streamed or not."""
    timer = threading.Timer(RESULT_TTL, active_scans.pop, args=(scan_id, None))
    timer.daemon = True
    timer.start()
    return timer


# ────────────────────────────────────────────────────────────────────
# ROUTES
# ────────────────────────────────────────────────────────────────────

@app.route("/api/scan", methods=["POST"])
def start_scan():
    """
    Start a new compliance scan.

    Expects JSON: {"url": "example.com", "timeout": 60, "user_agent": "...",
                   "wait_for_network_idle": true}  (all but url optional)
    Returns JSON: {"scan_id": "..."}
    """
    data = request.get_json(silent=True) or {}
    url = (data.get("url") or "").strip()

    if not url:
        return jsonify({"error": "URL is required"}), 400

    try:
        scan_request = ScanRequest.create(
            url,
            timeout=data.get("timeout"),
            user_agent=data.get("user_agent"),
            wait_for_network_idle=bool(data.get("wait_for_network_idle", True)),
        )
    except (TypeError, ValueError) as e:
        return jsonify({"error": str(e)}), 400

    scan_id = str(uuid.uuid4())
    active_scans[scan_id] = {
        "queue": Queue(),
        "url": scan_request.url,
        "result": None,
        "error": None,
        "done": False,
    }

    thread = threading.Thread(target=_run_scan, args=(scan_id, scan_request), daemon=True)
    active_scans[scan_id]["thread"] = thread
    thread.start()

    return jsonify({"scan_id": scan_id})


@app.route("/api/scan/<scan_id>/stream")
def scan_stream(scan_id):
    """
    SSE endpoint: streams real-time progress events for a scan.

    Event types:
      status     progress update (step N of M)
      complete   final result payload
      scan_error scan failed
      done       terminal event, close the stream
    """
    if scan_id not in active_scans:
        return jsonify({"error": "Scan not found"}), 404

    q = active_scans[scan_id]["queue"]

    def generate():
        while True:
            try:
                msg = q.get(timeout=120)
                if msg is None:
                    yield f"event: done\ndata: {json.dumps({'status': 'finished'})}\n\n"
                    break
                event_type = msg.get("event", "status")
                data = msg.get("data", {})
                yield f"event: {event_type}\ndata: {json.dumps(data)}\n\n"
            except Empty:
                # Keepalive to prevent proxy/browser timeout.
                yield ": keepalive\n\n"

    return Response(
        generate(),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            "Connection": "keep-alive",
        },
    )


@app.route("/api/scan/<scan_id>/result")
def scan_result(scan_id):
    """Get the final result of a scan as JSON (failed scans included)."""
    scan = active_scans.get(scan_id)
    if scan is None:
        return jsonify({"error": "Scan not found"}), 404
    if not scan["done"]:
        return jsonify({"status": "in_progress"}), 202
    if scan["result"] is not None:
        return jsonify(scan["result"])
    return jsonify({"error": scan["error"] or "Scan failed"}), 500


# ────────────────────────────────────────────────────────────────────
# ENTRY POINT
# ────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    port = int(os.environ.get("PORT", "8080"))
    print("\n  GDPR Compliance Scanner API")
    print(f"  http://localhost:{port}\n")
    app.run(host="0.0.0.0", debug=False, port=port, threaded=True)
