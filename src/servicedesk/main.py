from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .absences.controller import register as register_absences
from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .dashboards.controller import register as register_dashboards
from .database.bootstrap import SCHEMA_PATH, apply_schema, ensure_demo_users
from .profiles.controller import register as register_profiles
from .settings import get_settings_module
from .tasks.controller import register as register_tasks
from .team_calendar.controller import register as register_team_calendar
from .users.controller import register as register_users

logger = logging.getLogger(__name__)



def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory. Pass a container to run against other repositories."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        container = build_container(db_config=db_config)
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn, schema_path=SCHEMA_PATH)
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(container.conn)

    app.extensions["servicedesk"] = container

    register_users(app, container)
    register_profiles(app, container)
    register_absences(app, container)
    register_attendance(app, container)
    register_tasks(app, container)
    register_team_calendar(app, container)
    register_dashboards(app, container)

    return app
