from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from servicedesk.database.bootstrap import ensure_demo_users
from servicedesk.database.connection import DBConfig, DatabaseConnection
from servicedesk.settings import get_settings_module

logger = logging.getLogger("servicedesk.scripts.seed_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))

    ensure_demo_users(conn)
    cfg = conn.config
    logger.info("Seeded demo users -> %s@%s:%s/%s", cfg.user, cfg.host, cfg.port, cfg.database)


if __name__ == "__main__":
    main()
