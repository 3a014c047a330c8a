"""Django management command to load policies into the Casbin policy rule table.

The command supports:
- Specifying the path to the Casbin policy file. Default is 'casbin_sqldb_adapter/engine/config/authz.policy'.
- Specifying the Casbin model configuration file. Default is the CASBIN_MODEL setting.
- Choosing the database alias and the policy rule table.
- Optionally clearing existing policies in the table before loading new ones.
"""

import os

import casbin
import click
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from casbin_sqldb_adapter import ROOT_DIRECTORY
from casbin_sqldb_adapter.engine.adapter import SQLDBAdapter
from casbin_sqldb_adapter.engine.enforcer import create_enforcer
from casbin_sqldb_adapter.engine.exceptions import AdapterError
from casbin_sqldb_adapter.engine.utils import migrate_policy_between_enforcers


class Command(BaseCommand):
    """Django management command to load policies into the policy rule table.

    Example Usage:
        python manage.py load_policies --policy-file-path /path/to/authz.policy
        python manage.py load_policies --policy-file-path /path/to/authz.policy --model-file-path /path/to/model.conf
        python manage.py load_policies --database policies --table-name casbin_rule --clear-existing
        python manage.py load_policies
    """

    help = "Load policies from a Casbin policy file into the policy rule table."

    def add_arguments(self, parser) -> None:
        """Add command-line arguments to the argument parser.

        Args:
            parser: The Django argument parser instance to configure.
        """
        parser.add_argument(
            "--policy-file-path",
            type=str,
            default=None,
            help="Path to the Casbin policy file (CSV format with policies and role assignments)",
        )
        parser.add_argument(
            "--model-file-path",
            type=str,
            default=None,
            help="Path to the Casbin model configuration file",
        )
        parser.add_argument(
            "--database",
            type=str,
            default=None,
            help="Database alias holding the policy rule table",
        )
        parser.add_argument(
            "--table-name",
            type=str,
            default=None,
            help="Name of the policy rule table",
        )
        parser.add_argument(
            "--clear-existing",
            action="store_true",
            help="Flag to clear existing policies before loading new ones",
        )

    def handle(self, *args, **options):
        """Execute the policy loading command.

        Raises:
            CommandError: If a file is not found or the policy rule table is not available.
        """
        policy_file_path = options["policy_file_path"]
        model_file_path = options["model_file_path"]
        if policy_file_path is None:
            policy_file_path = os.path.join(ROOT_DIRECTORY, "engine", "config", "authz.policy")
        if model_file_path is None:
            model_file_path = settings.CASBIN_MODEL

        if not os.path.isfile(policy_file_path):
            raise CommandError(f"Policy file not found: {policy_file_path}")
        if not os.path.isfile(model_file_path):
            raise CommandError(f"Model file not found: {model_file_path}")

        try:
            adapter = SQLDBAdapter(db_alias=options["database"], table_name=options["table_name"])
        except AdapterError as e:
            raise CommandError(str(e)) from e

        with adapter:
            target_enforcer = create_enforcer(model_file_path, adapter)

            if options.get("clear_existing") and click.confirm(
                click.style(
                    f"Do you want to delete every policy stored in '{adapter.table_name}'?",
                    fg="yellow",
                    bold=True,
                ),
                default=False,
            ):
                self._delete_existing_policies(target_enforcer)

            source_enforcer = casbin.Enforcer(model_file_path, policy_file_path)
            migrated = migrate_policy_between_enforcers(source_enforcer, target_enforcer)

        self.stdout.write(self.style.SUCCESS(f"Loaded {migrated} rules from {policy_file_path}"))

    def _delete_existing_policies(self, target_enforcer):
        """Delete every stored policy rule.

        Args:
            target_enforcer: The Casbin enforcer instance to delete policies from.
        """
        target_enforcer.clear_policy()
        target_enforcer.save_policy()
        click.echo("Deleted existing policies")
