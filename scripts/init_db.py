from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from servicedesk.database.bootstrap import SCHEMA_PATH, apply_schema
from servicedesk.database.connection import DBConfig, DatabaseConnection
from servicedesk.settings import get_settings_module

logger = logging.getLogger("servicedesk.scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))

    count = apply_schema(conn, schema_path=SCHEMA_PATH)
    cfg = conn.config
    logger.info("Applied schema.sql -> %s@%s:%s/%s (%d statements)", cfg.user, cfg.host, cfg.port, cfg.database, count)


if __name__ == "__main__":
    main()
