"""Test cases for the enforcer factory."""

import os

from casbin import SyncedEnforcer
from django.test import TestCase

from casbin_sqldb_adapter import ROOT_DIRECTORY
from casbin_sqldb_adapter.engine.adapter import SQLDBAdapter
from casbin_sqldb_adapter.engine.enforcer import create_enforcer
from casbin_sqldb_adapter.engine.exceptions import TableMissing
from casbin_sqldb_adapter.models import CasbinRule


class TestCreateEnforcer(TestCase):
    """Tests for create_enforcer."""

    def setUp(self):
        super().setUp()
        CasbinRule.objects.create(ptype="p", v0="alice", v1="data1", v2="read")
        CasbinRule.objects.create(ptype="p", v0="data2_admin", v1="data2", v2="write")
        CasbinRule.objects.create(ptype="g", v0="bob", v1="data2_admin")

    def test_enforcer_uses_stored_policy(self):
        """Test that the enforcer decides with the rules stored in the database."""
        enforcer = create_enforcer()

        self.assertIsInstance(enforcer, SyncedEnforcer)
        self.assertTrue(enforcer.enforce("alice", "data1", "read"))
        self.assertTrue(enforcer.enforce("bob", "data2", "write"))
        self.assertFalse(enforcer.enforce("alice", "data2", "write"))

    def test_enforcer_with_given_adapter(self):
        """Test that a given adapter and model path are used as is."""
        adapter = SQLDBAdapter()

        enforcer = create_enforcer(os.path.join(ROOT_DIRECTORY, "engine", "config", "model.conf"), adapter)

        self.assertIs(enforcer._e.adapter, adapter)  # pylint: disable=protected-access

    def test_enforcer_changes_are_saved(self):
        """Test that policy changes made through the enforcer reach the table."""
        enforcer = create_enforcer()

        enforcer.add_policy("carol", "data3", "read")
        enforcer.remove_grouping_policy("bob", "data2_admin")

        self.assertTrue(CasbinRule.objects.filter(ptype="p", v0="carol", v1="data3", v2="read").exists())
        self.assertFalse(CasbinRule.objects.filter(ptype="g").exists())

    def test_adapter_arguments_are_forwarded(self):
        """Test that adapter arguments reach the adapter constructor."""
        with self.assertRaises(TableMissing):
            create_enforcer(table_name="missing_casbin_rule")
