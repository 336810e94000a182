from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.hr_payroll.hr_payroll.database.bootstrap import apply_seed_sql, ensure_admin_user


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    seed_path = REPO_ROOT / "database" / "seed.sql"
    apply_seed_sql(db_config, seed_path=seed_path)

    admin_password = getattr(settings, "ADMIN_PASSWORD", None)
    if admin_password:
        ensure_admin_user(
            db_config,
            username=getattr(settings, "ADMIN_USERNAME", "admin"),
            email=getattr(settings, "ADMIN_EMAIL", "admin@example.com"),
            password=admin_password,
        )
    else:
        print("ADMIN_PASSWORD not set: skipping admin account")

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
