import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_payroll_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

BUSINESS_TIMEZONE = "Asia/Jakarta"
NIK_DEFAULT_DEPARTMENTS = ("General", "Operational")

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "/tmp/hr_payroll_uploads")
MAX_UPLOAD_BYTES = 2 * 1024 * 1024

ADMIN_SECRET = "test-admin-secret"
