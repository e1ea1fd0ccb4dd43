import os

from .base import database_settings, env_flag

SECRET_KEY = "test-secret"
DB_CONFIG = database_settings("generus_attendance_test")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

BARCODE_PREFIX = "GEN"
SESSION_LIFETIME_DAYS = 1

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
