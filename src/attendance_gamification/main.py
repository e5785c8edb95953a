from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_config import setup_logging
from .container import build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_default_settings, list_tables
from .gamification.controller import register as register_gamification

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[2]


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["LOG_LEVEL"] = getattr(settings, "LOG_LEVEL", "INFO")
    app.config["LOG_DIR"] = getattr(settings, "LOG_DIR", "logs")
    app.config["LOG_RETENTION_DAYS"] = getattr(settings, "LOG_RETENTION_DAYS", 14)
    app.config["CRON_SECRET"] = getattr(settings, "CRON_SECRET", "")

    setup_logging(app)
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        inserted = ensure_default_settings(db_config)
        logger.info("seed ready (%s default settings inserted)", inserted)

    container = build_container(
        db_config=db_config,
        line_channel_access_token=getattr(settings, "LINE_CHANNEL_ACCESS_TOKEN", "") or None,
        line_target_id=getattr(settings, "LINE_TARGET_ID", "") or None,
        leaderboard_limit=int(getattr(settings, "LEADERBOARD_LIMIT", 50)),
    )

    register_gamification(app, container)

    return app
