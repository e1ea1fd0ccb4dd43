import os

from .base import database_settings, env_flag, env_int

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = database_settings("generus_attendance")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

BARCODE_PREFIX = os.getenv("BARCODE_PREFIX", "GEN")
SESSION_LIFETIME_DAYS = env_int("SESSION_LIFETIME_DAYS", 7)

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
