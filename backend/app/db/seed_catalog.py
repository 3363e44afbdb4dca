"""Upsert the built-in timing catalog into the configured database.

Usage: python -m app.db.seed_catalog
"""
from __future__ import annotations

import logging

from app.core.config import settings
from app.core.logging import configure_logging
from app.db.session import SessionLocal
from app.services.catalog_service import seed_builtin_catalog

logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging(log_level=settings.log_level)
    db = SessionLocal()
    try:
        counts = seed_builtin_catalog(db)
    finally:
        db.close()
    logger.info("Catalog seed complete: %s", counts)


if __name__ == "__main__":
    main()
