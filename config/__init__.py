import importlib
import os

_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "testing": "config.testing",
    "test": "config.testing",
    "production": "config.production",
    "prod": "config.production",
}


def get_settings_module() -> str:
    """Dotted name of the settings module selected by ``APP_ENV``."""

    return _MODULES.get(os.getenv("APP_ENV", "development").strip().lower(), "config.development")


def load_settings():
    return importlib.import_module(get_settings_module())
