import json
import logging
import threading
from typing import Callable, Optional

from flask import Flask, Response, request
from werkzeug.serving import make_server

from hopmap.config import HopmapConfig
from hopmap.exceptions import InvalidTargetException, ProbeFailedException
from hopmap.pipeline import TracePipeline
from hopmap.probe import SAMPLE_TRACEROUTE, run_traceroute, validate_target
from hopmap.utils import logger

CLIENT_IP_HEADER = "CF-Connecting-IP"
DEFAULT_CLIENT_IP = "127.0.0.1"

Prober = Callable[[str], str]


def _json_response(payload, status=200) -> Response:
    return Response(json.dumps(payload), status=status, mimetype="application/json")


def create_app(pipeline: TracePipeline, config: Optional[HopmapConfig] = None, prober: Optional[Prober] = None) -> Flask:
    """
    API documentation:
    * GET /api - traces back to the caller (CF-Connecting-IP) and returns the located hops
    * GET /api/v1/status - returns status of API
    """
    config = config or HopmapConfig.default_config()
    if prober is None:

        def prober(target: str) -> str:
            return run_traceroute(
                target,
                max_hops=config.get_flag("probe_max_hops"),
                wait_seconds=config.get_flag("probe_wait_seconds"),
                queries=config.get_flag("probe_queries"),
            )

    app = Flask("hopmap_api")

    @app.route("/api/v1/status", methods=["GET"])
    def get_status():
        return _json_response({"status": "ok"})

    @app.route("/api", methods=["GET"])
    def get_trace():
        if config.dev_mode:
            # no client address to trace in development
            hops = pipeline.run_text(SAMPLE_TRACEROUTE)
            return _json_response([hop.as_dict() for hop in hops])

        client_ip = request.headers.get(CLIENT_IP_HEADER) or DEFAULT_CLIENT_IP
        try:
            target = validate_target(client_ip)
        except InvalidTargetException as e:
            logger.fs.warning(f"[hopmap_api] {e}; headers: {dict(request.headers)}")
            return _json_response({"error": str(e)}, status=422)

        try:
            output = prober(target)
        except ProbeFailedException as e:
            logger.fs.error(f"[hopmap_api] Probe to {target} failed: {e}")
            return _json_response({"error": str(e)}, status=500)

        hops = pipeline.run_text(output)
        return _json_response([hop.as_dict() for hop in hops])

    return app


class TraceAPI(threading.Thread):
    """Serves the API from a background thread with werkzeug's threaded server.
    Each request runs its own pipeline pass; they share the cache and reference tables."""

    def __init__(self, app: Flask, host="0.0.0.0", port=8080):
        super().__init__(daemon=True)
        self.app = app
        self.host = host
        self.port = port
        self.url = "http://{}:{}".format(host, port)
        logging.getLogger("werkzeug").setLevel(logging.WARNING)
        self.server = make_server(host, port, self.app, threaded=True)

    def run(self):
        logger.fs.info(f"[hopmap_api] Serving on {self.url}")
        self.server.serve_forever()

    def shutdown(self):
        self.server.shutdown()
        self.server.server_close()
