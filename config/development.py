import os

from config import env_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_payroll"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed reference data (departments, NIK configs, components) on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "Asia/Jakarta")
NIK_DEFAULT_DEPARTMENTS = env_list("NIK_DEFAULT_DEPARTMENTS", ("General", "Operational"))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(2 * 1024 * 1024)))

# Bearer token for POST /api/admin-create-user
ADMIN_SECRET = os.getenv("ADMIN_SECRET", "dev-admin-secret")
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
