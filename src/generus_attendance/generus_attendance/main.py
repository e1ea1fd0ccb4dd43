from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module, load_settings

from .attendance.controller import register as register_attendance
from .checkins.controller import register as register_checkins
from .container import Container, build_container
from .core.constants import DEFAULT_BARCODE_PREFIX, DEFAULT_SESSION_DAYS
from .database.bootstrap import apply_schema, apply_seed_sql, describe_target, ensure_demo_accounts, list_tables
from .feedback.controller import register as register_feedback
from .id_cards.controller import register as register_id_cards
from .kbm.controller import register as register_kbm
from .materials.controller import register as register_materials
from .members.controller import register as register_members
from .statistics.controller import register as register_statistics
from .teachers.controller import register as register_teachers
from .testing.controller import register as register_testing

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Passing ``container`` skips every database step (used by the tests).
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings = load_settings()
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_LIFETIME_DAYS", DEFAULT_SESSION_DAYS)))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "DEBUG" if app.config["DEBUG"] else "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        logger.info("settings=%s db=%s", get_settings_module(), describe_target(db_config))

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
            ensure_demo_accounts(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            barcode_prefix=getattr(settings, "BARCODE_PREFIX", DEFAULT_BARCODE_PREFIX),
        )

    register_teachers(app, container)
    register_members(app, container)
    register_kbm(app, container)
    register_attendance(app, container)
    register_checkins(app, container)
    register_statistics(app, container)
    register_testing(app, container)
    register_materials(app, container)
    register_feedback(app, container)
    register_id_cards(app, container)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"success": False, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        logger.exception("unhandled error")
        return jsonify({"success": False, "message": "Internal server error"}), 500

    return app
