"""
Enforcer factory for Casbin policies stored with the SQLDBAdapter.

Usage:
    from casbin_sqldb_adapter.engine.enforcer import create_enforcer
    enforcer = create_enforcer()
    allowed = enforcer.enforce(user, resource, action)

The enforcer is not kept as a process-wide singleton: callers own both the
enforcer and its adapter, and close the adapter when they are done with it.
Uses the `CASBIN_MODEL` setting when no model path is given.
"""

import logging

from casbin import SyncedEnforcer
from django.conf import settings

from casbin_sqldb_adapter.engine.adapter import SQLDBAdapter

logger = logging.getLogger(__name__)


def create_enforcer(model_path: str = None, adapter: SQLDBAdapter = None, **adapter_kwargs) -> SyncedEnforcer:
    """
    Create a Casbin SyncedEnforcer backed by a SQLDBAdapter.

    The enforcer loads every stored policy rule when it is created.

    Args:
        model_path (str): Path of the Casbin model configuration. Defaults to the
            ``CASBIN_MODEL`` setting.
        adapter (SQLDBAdapter): Adapter to use. A new one is created from
            ``adapter_kwargs`` when omitted.
        **adapter_kwargs: Arguments for the SQLDBAdapter constructor.

    Returns:
        SyncedEnforcer: Configured Casbin enforcer.
    """
    if model_path is None:
        model_path = settings.CASBIN_MODEL
    if adapter is None:
        adapter = SQLDBAdapter(**adapter_kwargs)

    try:
        return SyncedEnforcer(model_path, adapter)
    except Exception as e:
        logger.error(f"Failed to initialize Casbin enforcer with model '{model_path}': {e}")
        raise
