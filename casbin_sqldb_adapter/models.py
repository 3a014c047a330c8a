"""
Database models for Casbin policy storage.

Policy rules live in a single table with a policy type column (``p_type``) and
six value columns (``v0``..``v5``). The default ``casbin_rule`` table is created
by this app's migrations. Adapters configured with another table name get an
unmanaged model for it from ``get_rule_model``; that table must already exist.
"""

from django.db import models

from casbin_sqldb_adapter.engine.codec import rule_to_line

DEFAULT_TABLE_NAME = "casbin_rule"

_rule_models = {}


class AbstractCasbinRule(models.Model):
    """Columns shared by every policy rule table.

    .. no_pii:
    """

    ptype = models.CharField(max_length=255, db_column="p_type")
    v0 = models.CharField(max_length=255, blank=True, default="")
    v1 = models.CharField(max_length=255, blank=True, default="")
    v2 = models.CharField(max_length=255, blank=True, default="")
    v3 = models.CharField(max_length=255, blank=True, default="")
    v4 = models.CharField(max_length=255, blank=True, default="")
    v5 = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        abstract = True

    def __str__(self):
        return rule_to_line(self)

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.id}: "{self}">'


class CasbinRule(AbstractCasbinRule):
    """Policy rule stored in the default ``casbin_rule`` table.

    .. no_pii:
    """

    class Meta:
        db_table = DEFAULT_TABLE_NAME


def get_rule_model(table_name: str) -> type[AbstractCasbinRule]:
    """Get the model bound to a policy rule table.

    Models for non-default tables are built once per table name and reused.

    Args:
        table_name (str): Name of the policy rule table.

    Returns:
        type[AbstractCasbinRule]: ``CasbinRule`` for the default table, an
            unmanaged model for any other table.
    """
    if table_name == CasbinRule._meta.db_table:
        return CasbinRule

    if table_name not in _rule_models:
        meta = type(
            "Meta",
            (),
            {"db_table": table_name, "managed": False, "app_label": CasbinRule._meta.app_label},
        )
        model_name = f"CasbinRule_{table_name.encode().hex()}"
        _rule_models[table_name] = type(
            model_name,
            (AbstractCasbinRule,),
            {"__module__": __name__, "Meta": meta},
        )
    return _rule_models[table_name]
