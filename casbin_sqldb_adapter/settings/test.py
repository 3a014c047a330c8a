"""
Test settings for the casbin_sqldb_adapter app.
"""

import os

from casbin_sqldb_adapter import ROOT_DIRECTORY

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": "default.db",
        "USER": "",
        "PASSWORD": "",
        "HOST": "",
        "PORT": "",
        "TEST": {
            "NAME": "test_default.db",
        },
    }
}

INSTALLED_APPS = (
    "django.contrib.contenttypes",
    "casbin_sqldb_adapter.apps.CasbinSQLDBAdapterConfig",
)

SECRET_KEY = "test-secret-key"

USE_TZ = True

# Casbin configuration
CASBIN_MODEL = os.path.join(ROOT_DIRECTORY, "engine", "config", "model.conf")
CASBIN_DB_ALIAS = "default"
CASBIN_RULE_TABLE = "casbin_rule"
