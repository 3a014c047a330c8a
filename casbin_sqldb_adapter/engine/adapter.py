"""
Casbin Adapter for Django-managed SQL databases.

This module provides the adapter that persists Casbin policy rules in a single
relational table through the Django ORM. Besides the base persistence
operations, the SQLDBAdapter supports filtered policy loading and batch
additions and removals.

Each rule is stored as one row: the policy type in ``p_type`` and up to six
values in ``v0``..``v5`` (see ``casbin_sqldb_adapter.engine.codec``). Queries
against the table are built from the lookups in
``casbin_sqldb_adapter.engine.filter``.
"""

import logging
from typing import Optional, Sequence

from casbin import persist
from casbin.model import Model
from casbin.persist import BatchAdapter, FilteredAdapter
from django.conf import settings
from django.db import DatabaseError, connections, transaction
from django.db.models import QuerySet
from django.utils.connection import ConnectionDoesNotExist

from casbin_sqldb_adapter.engine.codec import VALUE_FIELDS, encode_rule, rule_to_line
from casbin_sqldb_adapter.engine.exceptions import ConnectionFailure, MalformedLine, TableMissing
from casbin_sqldb_adapter.engine.filter import Filter, exact_match_lookups, filter_query, offset_filter_lookups
from casbin_sqldb_adapter.models import DEFAULT_TABLE_NAME, get_rule_model

logger = logging.getLogger(__name__)

SAVED_SECTIONS = ("p", "g")


class SQLDBAdapter(FilteredAdapter, BatchAdapter, persist.Adapter):
    """
    Casbin adapter storing policy rules in a SQL table.

    The adapter connects to its database when it is created and checks that the
    policy rule table can be queried. The connection is released with
    ``close()`` or by using the adapter as a context manager::

        with SQLDBAdapter(db_alias="default") as adapter:
            enforcer = casbin.Enforcer(model_path, adapter)

    Attributes:
        db_alias (str): Django database alias holding the table.
        table_name (str): Name of the policy rule table.
        rule_model: Django model bound to ``table_name``.
        atomic_save (bool): Whether ``save_policy`` runs in a single transaction.
        skip_malformed_lines (bool): Whether loads skip lines the model rejects
            instead of failing.
    """

    def __init__(
        self,
        db_alias: Optional[str] = None,
        table_name: Optional[str] = None,
        atomic_save: Optional[bool] = None,
        skip_malformed_lines: Optional[bool] = None,
    ):
        """
        Connect to the database and check the policy rule table.

        Arguments left as None are read from the ``CASBIN_DB_ALIAS``,
        ``CASBIN_RULE_TABLE``, ``CASBIN_ATOMIC_SAVE_POLICY`` and
        ``CASBIN_SKIP_MALFORMED_POLICY_LINES`` settings.

        Raises:
            ConnectionFailure: If the alias is unknown or the database is unreachable.
            TableMissing: If the policy rule table cannot be queried.
        """
        if db_alias is None:
            db_alias = getattr(settings, "CASBIN_DB_ALIAS", "default")
        if table_name is None:
            table_name = getattr(settings, "CASBIN_RULE_TABLE", DEFAULT_TABLE_NAME)
        if atomic_save is None:
            atomic_save = getattr(settings, "CASBIN_ATOMIC_SAVE_POLICY", True)
        if skip_malformed_lines is None:
            skip_malformed_lines = getattr(settings, "CASBIN_SKIP_MALFORMED_POLICY_LINES", False)

        self.db_alias = db_alias
        self.table_name = table_name
        self.atomic_save = atomic_save
        self.skip_malformed_lines = skip_malformed_lines
        self.rule_model = get_rule_model(table_name)
        self._filtered = False
        self._owns_connection = False

        self._open()
        self._ensure_table()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _open(self) -> None:
        """Open the connection of the configured database alias unless it is already open."""
        try:
            connection = connections[self.db_alias]
            self._owns_connection = connection.connection is None
            connection.ensure_connection()
        except (ConnectionDoesNotExist, DatabaseError) as e:
            logger.error(f"Failed to connect to database '{self.db_alias}': {e}")
            raise ConnectionFailure(f"Cannot connect to database '{self.db_alias}': {e}") from e

    def _ensure_table(self) -> None:
        """Probe the policy rule table with a trivial query."""
        try:
            with transaction.atomic(using=self.db_alias):
                self._execute(f"SELECT 1 FROM {self._quoted_table_name()} LIMIT 1")
        except DatabaseError as e:
            logger.error(f"Policy rule table '{self.table_name}' is not available on '{self.db_alias}': {e}")
            raise TableMissing(f"Table '{self.table_name}' is not available on '{self.db_alias}': {e}") from e

    def _clean_table(self) -> None:
        """Delete every row of the policy rule table."""
        self._execute(f"DELETE FROM {self._quoted_table_name()}")

    def _quoted_table_name(self) -> str:
        return connections[self.db_alias].ops.quote_name(self.table_name)

    def _execute(self, sql: str) -> None:
        with connections[self.db_alias].cursor() as cursor:
            cursor.execute(sql)

    def _objects(self) -> QuerySet:
        return self.rule_model.objects.using(self.db_alias)

    def close(self) -> None:
        """
        Close the database connection if this adapter opened it.

        A connection that was already open when the adapter was created belongs
        to its caller and is left open. So is any connection inside an atomic
        block.
        """
        connection = connections[self.db_alias]
        if not self._owns_connection or connection.in_atomic_block:
            logger.debug(f"Leaving connection '{self.db_alias}' open")
            return
        connection.close()
        self._owns_connection = False

    def load_policy(self, model: Model) -> None:
        """
        Load every policy rule from storage into the model.

        Args:
            model (Model): The Casbin model to load policy rules into.

        Raises:
            MalformedLine: If the model rejects a rule and malformed lines are not skipped.
        """
        loaded = self._load_rules(self._objects().order_by("id"), model)
        logger.info(f"Loaded {loaded} policy rules from '{self.table_name}'")

    def load_filtered_policy(self, model: Model, filter: Filter) -> None:  # pylint: disable=redefined-builtin
        """
        Load policy rules from storage with filtering applied.

        IMPORTANT: This method is used internally by the ``enforcer.load_filtered_policy()``
            method. If you need to load policy rules, use the enforcer method, which also
            clears the rules already loaded in the model.

        Args:
            model (Model): The Casbin model to load policy rules into.
            filter (Filter): Filter object containing criteria for policy selection.

        Raises:
            InvalidFilterType: If ``filter`` is not a ``Filter`` instance.
            MalformedLine: If the model rejects a rule and malformed lines are not skipped.
        """
        loaded = self._load_rules(filter_query(self._objects(), filter), model)
        self._filtered = True
        logger.info(f"Loaded {loaded} filtered policy rules from '{self.table_name}'")

    def is_filtered(self) -> bool:
        """
        Check whether a filtered load has succeeded on this adapter.

        Returns:
            bool: True once any filtered load succeeded, False before.
        """
        return self._filtered

    def _load_rules(self, queryset: QuerySet, model: Model) -> int:
        """Feed the rules of a queryset to the model and return how many were loaded."""
        loaded = 0
        for rule in queryset:
            line = rule_to_line(rule)
            if not line:
                if any(getattr(rule, field) for field in VALUE_FIELDS):
                    logger.warning(f"Skipping policy rule {rule.id} with an empty v0")
                else:
                    logger.debug(f"Skipping policy rule {rule.id} without values")
                continue
            try:
                persist.load_policy_line(line, model)
            except (IndexError, KeyError, ValueError) as e:
                if not self.skip_malformed_lines:
                    raise MalformedLine(line, str(e)) from e
                logger.warning(f"Skipping malformed policy rule {rule.id}: {line!r} ({e})")
                continue
            loaded += 1
        return loaded

    def save_policy(self, model: Model) -> bool:
        """
        Replace every stored rule with the rules of the model.

        Rules of the ``p`` and ``g`` sections are saved. The table is emptied
        first, then all rules are inserted in one batch. Unless ``atomic_save``
        is disabled both steps run in a single transaction, so a failure leaves
        the previous rules in place.

        Args:
            model (Model): The Casbin model to save policy rules from.

        Returns:
            bool: True when the rules were saved.
        """
        rules = []
        for sec in SAVED_SECTIONS:
            if sec not in model.model:
                continue
            for ptype, assertion in model.model[sec].items():
                for rule in assertion.policy:
                    rules.append(self.rule_model(**encode_rule(ptype, rule)))

        if self.atomic_save:
            with transaction.atomic(using=self.db_alias):
                self._replace_rules(rules)
        else:
            self._replace_rules(rules)

        logger.info(f"Saved {len(rules)} policy rules to '{self.table_name}'")
        return True

    def _replace_rules(self, rules: list) -> None:
        self._clean_table()
        self._objects().bulk_create(rules)

    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """
        Add a policy rule to storage.

        Args:
            sec (str): Model section of the rule (unused, the policy type is stored).
            ptype (str): Policy type of the rule.
            rule (Sequence[str]): Rule values.

        Returns:
            bool: True when the rule was stored.
        """
        self._objects().create(**encode_rule(ptype, rule))
        return True

    def add_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> bool:
        """
        Add several policy rules to storage in one batch.

        No duplicate check is made. The batch is not transactional.

        Returns:
            bool: True when the rules were stored.
        """
        self._objects().bulk_create([self.rule_model(**encode_rule(ptype, rule)) for rule in rules])
        return True

    def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """
        Remove every stored copy of a policy rule.

        Returns:
            bool: True if at least one row was deleted.
        """
        rows_deleted, _ = self._objects().filter(**exact_match_lookups(ptype, rule)).delete()
        return rows_deleted > 0

    def remove_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> bool:
        """
        Remove several policy rules in a single transaction.

        If removing any rule fails, no rule is removed.

        Returns:
            bool: True when every removal ran.
        """
        with transaction.atomic(using=self.db_alias):
            for rule in rules:
                self._objects().filter(**exact_match_lookups(ptype, rule)).delete()
        return True

    def remove_filtered_policy(self, sec: str, ptype: str, field_index: int, *field_values: str) -> bool:
        """
        Remove the policy rules matching values from a given field onwards.

        Args:
            sec (str): Model section of the rules (unused).
            ptype (str): Policy type of the rules.
            field_index (int): Column offset of the first value, e.g. 1 for ``v1``.
            *field_values (str): Values to match; empty values match anything.

        Returns:
            bool: True if at least one row was deleted.
        """
        lookups = offset_filter_lookups(ptype, field_index, field_values)
        rows_deleted, _ = self._objects().filter(**lookups).delete()
        return rows_deleted > 0
