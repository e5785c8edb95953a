from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler

from flask import Flask, has_request_context, session

LOG_FORMAT = "%(asctime)s - %(levelname)s - user=%(session_user)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class SessionUserFilter(logging.Filter):
    """Adds the logged-in user id to records; 'system' outside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        user = None
        if has_request_context():
            user = session.get("user_id")
        record.session_user = user if user is not None else "system"
        return True


def setup_logging(app: Flask) -> None:
    """Console + daily rotated app.log/errors.log handlers on the package logger."""

    log_dir = app.config.get("LOG_DIR") or os.path.join(os.getcwd(), "logs")
    os.makedirs(log_dir, exist_ok=True)

    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    retention_days = int(app.config.get("LOG_RETENTION_DAYS", 14))

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    context = SessionUserFilter()

    file_handler = TimedRotatingFileHandler(
        os.path.join(log_dir, "app.log"), when="midnight", backupCount=retention_days, encoding="utf-8"
    )
    error_handler = TimedRotatingFileHandler(
        os.path.join(log_dir, "errors.log"), when="midnight", backupCount=retention_days, encoding="utf-8"
    )
    error_handler.setLevel(logging.ERROR)
    console_handler = logging.StreamHandler()

    package_logger = logging.getLogger("attendance_gamification")
    package_logger.setLevel(level)
    for handler in (file_handler, error_handler, console_handler):
        handler.setFormatter(formatter)
        handler.addFilter(context)
        package_logger.addHandler(handler)

    app.logger.setLevel(level)
