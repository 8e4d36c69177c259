# FILE: curations/settings.py
import os
from pathlib import Path

# Everything configurable is read from the environment once, here.
PACKAGE_DIR = Path(__file__).resolve().parent

SERVICE_NAME = "curations"
VERSION = "0.3.0"

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# --- persisted state ---
DATA_DIR = Path(os.getenv("DATA_DIR", "."))
SUBSCRIBERS_FILE = Path(os.getenv("SUBSCRIBERS_FILE", str(DATA_DIR / "subscribers.json")))
AFFILIATES_FILE = Path(os.getenv("AFFILIATES_FILE", str(DATA_DIR / "affiliates.json")))
ITEMS_FILE = Path(os.getenv("ITEMS_FILE", str(PACKAGE_DIR / "data" / "items.json")))
STATIC_DIR = Path(os.getenv("STATIC_DIR", str(PACKAGE_DIR / "static")))

# "json" (flat files) or "sql" (embedded database via DATABASE_URL)
STORE_BACKEND = os.getenv("STORE_BACKEND", "json").strip().lower()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./curations.db")

# --- admin ---
# Empty means open admin mode (demo only).
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "").strip()
ADMIN_HEADER = "X-Admin-Token"

# --- outbound mail ---
SMTP_HOST = os.getenv("SMTP_HOST", "").strip()
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "").strip()
SMTP_PASS = os.getenv("SMTP_PASS", "").strip()
SMTP_FROM = os.getenv("SMTP_FROM", "").strip()
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "false").lower() == "true"
SMTP_TIMEOUT = float(os.getenv("SMTP_TIMEOUT", "30"))

# --- logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "").strip()
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(2 * 1024 * 1024)))
LOG_BACKUPS = int(os.getenv("LOG_BACKUPS", "3"))
