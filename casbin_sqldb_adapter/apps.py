"""
casbin_sqldb_adapter Django application initialization.
"""

from django.apps import AppConfig


class CasbinSQLDBAdapterConfig(AppConfig):
    """
    Configuration for the casbin_sqldb_adapter Django application.

    No database query is made while the app loads. Adapters connect to the
    database when they are created (see casbin_sqldb_adapter/engine/adapter.py).
    """

    name = "casbin_sqldb_adapter"
    verbose_name = "Casbin SQL DB Adapter"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        """Fill in the adapter settings the project left unset."""
        from django.conf import settings  # pylint: disable=import-outside-toplevel

        from casbin_sqldb_adapter.settings import common  # pylint: disable=import-outside-toplevel

        common.plugin_settings(settings)
