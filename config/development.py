import os

from .base import database_settings, env_flag, env_int

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DB_CONFIG = database_settings("generus_attendance")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# member barcodes look like GEN12_1718000000000
BARCODE_PREFIX = os.getenv("BARCODE_PREFIX", "GEN")
SESSION_LIFETIME_DAYS = env_int("SESSION_LIFETIME_DAYS", 7)

# schema.sql only uses CREATE ... IF NOT EXISTS, so re-applying on start is safe
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
