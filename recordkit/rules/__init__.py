"""Locale rule table.

Declarative per-(field kind, country) rules and the token classification
table shared by name and company normalization.
"""

from recordkit.rules.enums import CasePolicy, FieldKind, TokenClass
from recordkit.rules.models import ANY_COUNTRY, LocaleRule
from recordkit.rules.table import (
    LocaleRuleTable,
    build_rule_table,
    get_default_rule_table,
    load_packaged_rules,
    load_rule_table,
    parse_rule_table,
)
from recordkit.rules.templates import fill_template
from recordkit.rules.tokens import TokenTable, fold_accents, token_key

__all__ = [
    # Enums
    "CasePolicy",
    "FieldKind",
    "TokenClass",
    # Models
    "ANY_COUNTRY",
    "LocaleRule",
    "TokenTable",
    # Table
    "LocaleRuleTable",
    "build_rule_table",
    "get_default_rule_table",
    "load_packaged_rules",
    "load_rule_table",
    "parse_rule_table",
    # Helpers
    "fill_template",
    "fold_accents",
    "token_key",
]
