# src/trayex/scripts/migrate.py
"""Apply database migrations up to the latest revision."""
from __future__ import annotations

import os

from alembic import command
from alembic.config import Config

from trayex.core.settings import settings

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def run_upgrade_head() -> None:
    cfg = Config()
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    run_upgrade_head()
