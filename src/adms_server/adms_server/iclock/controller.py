"""Device-facing ADMS endpoints.

Terminals only understand plain ``OK`` bodies on the handshake and heartbeat
routes; data uploads answer with JSON for operators replaying payloads.
"""
from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import PersistenceError, ValidationError

logger = logging.getLogger(__name__)


def _plain(body: str, status: int = 200):
    return body, status, {"Content-Type": "text/plain; charset=utf-8"}


def register(app: Flask, container: Container) -> None:
    @app.route("/iclock/getrequest.aspx", methods=["GET"], endpoint="iclock_getrequest")
    def iclock_getrequest():
        serial_number = (request.args.get("SN") or "").strip()
        if not serial_number:
            return _plain("OK", 400)

        container.liveness_tracker.on_heartbeat(serial_number)
        return _plain("OK")

    @app.route("/iclock/cdata.aspx", methods=["GET"], endpoint="iclock_cdata_handshake")
    def iclock_cdata_handshake():
        return _plain("OK")

    @app.route("/iclock/cdata.aspx", methods=["POST"], endpoint="iclock_cdata_upload")
    def iclock_cdata_upload():
        table = request.args.get("table") or request.args.get("options")
        try:
            raw = request.get_data(cache=False).decode("utf-8")
        except UnicodeDecodeError:
            return jsonify({"error": "Invalid body format"}), 400

        try:
            result = container.ingestion_service.ingest(table, raw)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except PersistenceError as e:
            logger.exception("Error processing cdata.aspx")
            return jsonify({"error": str(e)}), 500

        return jsonify(result.to_dict()), 200
