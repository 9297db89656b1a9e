from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.validators import require_iso_day
from ..container import Container
from ..core.exceptions import PersistenceError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/<day>", methods=["GET"], endpoint="attendance_for_day")
    def attendance_for_day(day: str):
        try:
            parsed = require_iso_day(day)
            rows = container.attendance_repo.list_by_day(parsed)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except PersistenceError as e:
            logger.exception("Error fetching attendance")
            return jsonify({"error": str(e)}), 500

        return jsonify([r.to_dict() for r in rows]), 200
