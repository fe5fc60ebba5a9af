import os
import secrets
from pathlib import Path

# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR}/pool.db")

# Security
SECRET_KEY = os.getenv("SECRET_KEY", secrets.token_hex(32))
SESSION_COOKIE_NAME = "session_token"
SESSION_EXPIRE_DAYS = int(os.getenv("SESSION_EXPIRE_DAYS", "7"))

# Admin credentials (in production, use environment variables)
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@pool.local")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "password")

# Scoring weights, overridable per competition edition
SCORE_EXACT = int(os.getenv("SCORE_EXACT", "25"))
SCORE_DIFF = int(os.getenv("SCORE_DIFF", "18"))
SCORE_OUTCOME = int(os.getenv("SCORE_OUTCOME", "10"))
SCORE_ONE_SIDE = int(os.getenv("SCORE_ONE_SIDE", "4"))
# JSON file with "exact", "diff", "outcome", "oneScore" keys; wins over the env values
SCORING_RULES_FILE = os.getenv("SCORING_RULES_FILE")

# Match lifecycle
LIVE_WINDOW_MINUTES = int(os.getenv("LIVE_WINDOW_MINUTES", "120"))
LOCK_MINUTES = int(os.getenv("LOCK_MINUTES", "10"))

# 0 means unlimited
MAX_JOKERS = int(os.getenv("MAX_JOKERS", "1"))

# Groups
JOIN_CODE_LENGTH = int(os.getenv("JOIN_CODE_LENGTH", "7"))

SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "true").lower() in ("1", "true", "yes")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv(
    "LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
