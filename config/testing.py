import os

SECRET_KEY = "test-secret-key-0123456789abcdef0123"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "vedomost_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TOKEN_DAYS = 1

AUTO_INIT_DB = False
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"

EXPORT_COLLAPSE_LATE = False

API_BASE_URL = "http://localhost"
REQUEST_TIMEOUT = 5.0
