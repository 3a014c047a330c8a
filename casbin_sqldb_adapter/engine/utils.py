"""Policy migration helpers.

This module copies policy rules between Casbin enforcers, typically from a
file-based enforcer into one backed by the SQLDBAdapter.
"""

import logging

from casbin import Enforcer

logger = logging.getLogger(__name__)

GROUPING_POLICY_PTYPES = ["g", "g2", "g3", "g4", "g5", "g6"]


def migrate_policy_between_enforcers(
    source_enforcer: Enforcer,
    target_enforcer: Enforcer,
) -> int:
    """Copy policies and grouping policies from one enforcer into another.

    Rules already present in the target are skipped.

    Args:
        source_enforcer (Enforcer): The Casbin enforcer instance to migrate policies from (e.g., file-based).
        target_enforcer (Enforcer): The Casbin enforcer instance to migrate policies to (e.g., database).

    Returns:
        int: Number of rules added to the target.
    """
    try:
        source_enforcer.load_policy()
        policies = source_enforcer.get_policy()
        logger.info(f"Loaded {len(policies)} policies from source enforcer.")

        target_enforcer.load_policy()
        logger.info(f"Target enforcer has {len(target_enforcer.get_policy())} existing policies before migration.")

        migrated = 0
        for policy in policies:
            if target_enforcer.has_policy(*policy):
                logger.info(f"Policy {policy} already exists in target, skipping.")
                continue
            target_enforcer.add_policy(*policy)
            migrated += 1

        source_model = source_enforcer.get_model().model
        for grouping_policy_ptype in GROUPING_POLICY_PTYPES:
            if grouping_policy_ptype not in source_model.get("g", {}):
                continue
            for grouping in source_enforcer.get_named_grouping_policy(grouping_policy_ptype):
                if target_enforcer.has_named_grouping_policy(grouping_policy_ptype, *grouping):
                    logger.info(
                        f"Grouping policy {grouping_policy_ptype}, {grouping} already exists in target, skipping."
                    )
                    continue
                target_enforcer.add_named_grouping_policy(grouping_policy_ptype, *grouping)
                migrated += 1

        logger.info(f"Migrated {migrated} rules into the target enforcer.")
        return migrated
    except Exception as e:
        logger.error(f"Error migrating policies between enforcers: {e}")
        raise
