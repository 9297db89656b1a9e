from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import DEFAULT_PUNCH_LIST_LIMIT
from ..core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/punches", methods=["GET"], endpoint="list_punches")
    def list_punches():
        try:
            limit = int(request.args.get("limit", DEFAULT_PUNCH_LIST_LIMIT))
        except ValueError:
            return jsonify({"error": "limit must be an integer"}), 400
        if limit <= 0:
            return jsonify({"error": "limit must be positive"}), 400

        try:
            rows = container.punches_repo.list_recent(limit)
        except PersistenceError as e:
            logger.exception("Error fetching punches")
            return jsonify({"error": str(e)}), 500

        return jsonify([r.to_dict() for r in rows]), 200
