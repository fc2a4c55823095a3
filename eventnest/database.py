# -*- coding: utf-8 -*-
"""
SQLAlchemy database setup for the FastAPI application.
"""

from datetime import datetime, timezone
import logging
import os

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow():
    """Naive UTC timestamp; every DateTime column stores UTC without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Database:
    """Owns the engine and the session factory for one application instance."""

    def __init__(self, url: str):
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}
            _ensure_sqlite_dir(url)

        self.url = url
        self.engine = create_engine(
            url,
            connect_args=connect_args,
            # checks the connection before handing it out
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self):
        # models must be imported so that they register on Base.metadata
        from eventnest import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ready")

    def dispose(self):
        self.engine.dispose()
        logger.info("Database connection closed")


def _ensure_sqlite_dir(url: str):
    if "///" not in url:
        return
    path = url.split("///", 1)[1]
    if not path or path == ":memory:":
        return
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


# Request-scoped session (used with Depends)
def get_db(request: Request):
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
