"""
Common settings for the casbin_sqldb_adapter app.
"""

import os

from casbin_sqldb_adapter import ROOT_DIRECTORY


def plugin_settings(settings):
    """
    Configure default settings for the adapter.

    This function is called when the app is ready. Settings already defined
    by the project are left untouched.

    Args:
        settings: The Django settings object
    """
    # Set default CASBIN_MODEL if not already set, this points to the model.conf file
    # which defines the access control model for Casbin.
    if not hasattr(settings, "CASBIN_MODEL"):
        settings.CASBIN_MODEL = os.path.join(ROOT_DIRECTORY, "engine", "config", "model.conf")

    # Database alias holding the policy rule table.
    if not hasattr(settings, "CASBIN_DB_ALIAS"):
        settings.CASBIN_DB_ALIAS = "default"

    # Name of the policy rule table. Only the default table is created by migrations.
    if not hasattr(settings, "CASBIN_RULE_TABLE"):
        settings.CASBIN_RULE_TABLE = "casbin_rule"

    # Set default CASBIN_ATOMIC_SAVE_POLICY if not already set.
    # When enabled, clearing the table and inserting the saved rules happen in
    # a single transaction.
    if not hasattr(settings, "CASBIN_ATOMIC_SAVE_POLICY"):
        settings.CASBIN_ATOMIC_SAVE_POLICY = True

    # Set default CASBIN_SKIP_MALFORMED_POLICY_LINES if not already set.
    # When disabled, a single malformed line aborts the whole policy load.
    if not hasattr(settings, "CASBIN_SKIP_MALFORMED_POLICY_LINES"):
        settings.CASBIN_SKIP_MALFORMED_POLICY_LINES = False
