from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .devices.controller import register as register_devices
from .iclock.controller import register as register_iclock
from .notifications.sink import NullNotificationSink
from .punches.controller import register as register_punches

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app(container: Optional[Container] = None, *, start_monitor: Optional[bool] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    present_minutes = int(getattr(settings, "MINUTES_FOR_PRESENT", 360))
    callback_url = getattr(settings, "CALLBACK_URL", None) or None

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        container = build_container(db_config=db_config, present_minutes=present_minutes, callback_url=callback_url)

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(container.conn, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    app.extensions["adms_container"] = container

    register_iclock(app, container)
    register_attendance(app, container)
    register_punches(app, container)
    register_devices(app, container)

    @app.route("/", methods=["GET"], endpoint="index")
    def index():
        aggregator_policy = container.aggregator.policy
        return jsonify(
            {
                "service": "ADMS Server",
                "minutes_for_present": aggregator_policy.present_minutes,
                "device_offline_threshold_seconds": int(container.liveness_tracker.offline_threshold.total_seconds()),
                "callback_configured": not isinstance(container.notifier, NullNotificationSink),
                "devices_in_cache": len(container.device_cache),
            }
        )

    if start_monitor is None:
        start_monitor = bool(getattr(settings, "START_DEVICE_MONITOR", True))
    if start_monitor:
        container.device_monitor.start()
        atexit.register(container.shutdown)

    return app
