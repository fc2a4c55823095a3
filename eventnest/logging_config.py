# -*- coding: utf-8 -*-
"""
Logging setup: console/file handlers, request id propagation and redaction
of sensitive values.
"""

import contextvars
import logging
from logging.handlers import RotatingFileHandler
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"

SENSITIVE_KEYS = ("password", "token", "authorization", "secret")

request_id_var = contextvars.ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    def filter(self, record):
        record.request_id = request_id_var.get()
        return True


def setup_logging(settings):
    root = logging.getLogger()
    # idempotent: the app factory can run several times in one process (tests)
    for handler in list(root.handlers):
        if getattr(handler, "_eventnest", False):
            root.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler()]

    if settings.log_file:
        directory = os.path.dirname(settings.log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handlers.append(RotatingFileHandler(settings.log_file, maxBytes=5 * 1024 * 1024, backupCount=5))

    for handler in handlers:
        handler._eventnest = True
        handler.setFormatter(formatter)
        handler.addFilter(RequestIdFilter())
        root.addHandler(handler)

    root.setLevel(settings.effective_log_level)
    # SQL echo only when explicitly asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def sanitize(data):
    """Return a copy of ``data`` with sensitive values replaced by ``[REDACTED]``."""
    if isinstance(data, dict):
        cleaned = {}
        for key, value in data.items():
            if any(term in str(key).lower() for term in SENSITIVE_KEYS):
                cleaned[key] = "[REDACTED]"
            else:
                cleaned[key] = sanitize(value)
        return cleaned
    if isinstance(data, (list, tuple)):
        return [sanitize(item) for item in data]
    return data
