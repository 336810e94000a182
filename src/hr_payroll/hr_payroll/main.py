from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import ApiJSONProvider, register_error_handlers
from .core.constants import BUSINESS_TIMEZONE, DEFAULT_NIK_DEPARTMENTS, MAX_UPLOAD_BYTES
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_admin_user, list_tables

from .container import build_container
from .attendance.controller import register as register_attendance
from .departments.controller import register as register_departments
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave
from .nik.controller import register as register_nik
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports
from .salaries.controller import register as register_salaries
from .sick_leave.controller import register as register_sick_leave
from .system.controller import register as register_system
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app() -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.json_provider_class = ApiJSONProvider
    app.json = ApiJSONProvider(app)

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ADMIN_SECRET"] = getattr(settings, "ADMIN_SECRET", None)
    max_upload_bytes = int(getattr(settings, "MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES))
    # multipart overhead on top of the document itself
    app.config["MAX_CONTENT_LENGTH"] = max_upload_bytes + 1024 * 1024

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        admin_password = getattr(settings, "ADMIN_PASSWORD", None)
        if admin_password:
            ensure_admin_user(
                db_config,
                username=getattr(settings, "ADMIN_USERNAME", "admin"),
                email=getattr(settings, "ADMIN_EMAIL", "admin@example.com"),
                password=admin_password,
            )
        logger.info("seed data ready")

    container = build_container(
        db_config=db_config,
        timezone=getattr(settings, "BUSINESS_TIMEZONE", BUSINESS_TIMEZONE),
        nik_default_departments=getattr(settings, "NIK_DEFAULT_DEPARTMENTS", DEFAULT_NIK_DEPARTMENTS),
        upload_dir=getattr(settings, "UPLOAD_DIR", "uploads"),
        max_upload_bytes=max_upload_bytes,
        environment=settings_module.rsplit(".", 1)[-1],
    )
    app.extensions["container"] = container

    register_error_handlers(app)
    register_system(app, container)
    register_users(app, container)
    register_departments(app, container)
    register_nik(app, container)
    register_employees(app, container)
    register_salaries(app, container)
    register_payroll(app, container)
    register_leave(app, container)
    register_sick_leave(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
