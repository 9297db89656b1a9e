from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..container import Container
from ..core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/devices", methods=["GET"], endpoint="list_devices")
    def list_devices():
        try:
            rows = container.liveness_tracker.list_devices_view()
        except PersistenceError as e:
            logger.exception("Error fetching devices")
            return jsonify({"error": str(e)}), 500
        return jsonify(rows), 200
