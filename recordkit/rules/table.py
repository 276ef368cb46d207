"""Locale rule table: lookup and loading.

The table is built once and never mutated afterwards, so any number of
threads may read it concurrently.
"""

import tomllib
from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping
from datetime import date
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from recordkit.config import get_settings
from recordkit.config.models import RulesConfig
from recordkit.errors import RuleConfigError, UnsupportedLocaleError
from recordkit.observability.logging import get_logger
from recordkit.rules.enums import FieldKind
from recordkit.rules.models import ANY_COUNTRY, LocaleRule
from recordkit.rules.tokens import TokenTable

logger = get_logger(__name__)

RECOGNIZED_KEYS: frozenset[str] = frozenset(LocaleRule.model_fields)


class LocaleRuleTable:
    """Read-only registry of LocaleRules keyed by (field kind, country)."""

    def __init__(
        self,
        rules: Iterable[LocaleRule],
        tokens: TokenTable | None = None,
    ) -> None:
        grouped: dict[tuple[FieldKind, str], list[LocaleRule]] = defaultdict(list)
        for rule in rules:
            for existing in grouped[rule.key]:
                if existing.overlaps(rule):
                    raise RuleConfigError(
                        f"Overlapping rules for {rule.field_kind.value}/{rule.country}"
                    )
            grouped[rule.key].append(rule)

        self._rules: Mapping[tuple[FieldKind, str], tuple[LocaleRule, ...]] = MappingProxyType(
            {key: tuple(group) for key, group in grouped.items()}
        )
        self.tokens = tokens or TokenTable()

    def __len__(self) -> int:
        return sum(len(group) for group in self._rules.values())

    def __iter__(self) -> Iterator[LocaleRule]:
        for group in self._rules.values():
            yield from group

    def lookup(
        self,
        field_kind: FieldKind | str,
        country: str | None,
        as_of: date | None = None,
    ) -> LocaleRule:
        """Find the rule for a field kind and country.

        An exact country rule wins over a country-independent ('*') rule.
        Among rules for the same key, the one effective on `as_of`
        (default: today) is returned.

        Raises:
            UnsupportedLocaleError: If no rule applies
        """
        kind = FieldKind.parse(field_kind)
        if kind is None:
            raise UnsupportedLocaleError(str(field_kind), country)

        day = as_of or date.today()
        keys = [(kind, ANY_COUNTRY)]
        if country:
            keys.insert(0, (kind, country.strip().upper()))

        for key in keys:
            for rule in self._rules.get(key, ()):
                if rule.is_effective(day):
                    return rule

        raise UnsupportedLocaleError(kind.value, country)

    def rules_for(self, field_kind: FieldKind) -> list[LocaleRule]:
        """All rules registered for a kind, country-independent ones included."""
        return [rule for rule in self if rule.field_kind == field_kind]

    def countries_for(self, field_kind: FieldKind) -> list[str]:
        """Countries with a dedicated rule for a kind."""
        return sorted({
            country
            for kind, country in self._rules
            if kind == field_kind and country != ANY_COUNTRY
        })

    def merged(self, other: "LocaleRuleTable") -> "LocaleRuleTable":
        """New table where other's rules replace this table's rules per key."""
        replaced = {rule.key for rule in other}
        rules = [rule for rule in self if rule.key not in replaced]
        rules.extend(other)
        return LocaleRuleTable(rules, self.tokens.merged(other.tokens))


def parse_rule_table(data: Mapping[str, Any], source: str = "<memory>") -> LocaleRuleTable:
    """Build a table from parsed rule-file data.

    Unknown rule keys are ignored with a warning; anything else that is
    wrong with a rule raises RuleConfigError.
    """
    entries = data.get("rules", [])
    if not isinstance(entries, list):
        raise RuleConfigError(f"'rules' must be an array of tables in {source}")

    rules: list[LocaleRule] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise RuleConfigError(f"Rule #{index} in {source} is not a table", rule_index=index)

        unknown = sorted(set(entry) - RECOGNIZED_KEYS)
        if unknown:
            logger.warning(
                "rule_unknown_keys_ignored",
                source=source,
                rule_index=index,
                keys=unknown,
            )

        known = {key: value for key, value in entry.items() if key in RECOGNIZED_KEYS}
        try:
            rules.append(LocaleRule.model_validate(known))
        except ValidationError as e:
            raise RuleConfigError(
                f"Invalid rule #{index} in {source}: {e}", rule_index=index
            ) from e

    tokens = TokenTable.from_mapping(data.get("tokens", {}))
    table = LocaleRuleTable(rules, tokens)
    logger.info("rule_table_loaded", source=source, rule_count=len(table))
    return table


def load_rule_table(path: Path) -> LocaleRuleTable:
    """Load a rule table from a TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        RuleConfigError: If the file is not valid TOML or a rule is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Rule file not found: {path}")

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise RuleConfigError(f"Invalid TOML in {path}: {e}") from e

    return parse_rule_table(data, source=str(path))


def load_packaged_rules() -> LocaleRuleTable:
    """Load the rule set shipped with recordkit."""
    resource = resources.files("recordkit.rules").joinpath("data/default_rules.toml")
    data = tomllib.loads(resource.read_text(encoding="utf-8"))
    return parse_rule_table(data, source="recordkit:default_rules.toml")


def build_rule_table(config: RulesConfig) -> LocaleRuleTable:
    """Assemble the active table from configuration."""
    table = load_packaged_rules() if config.include_defaults else LocaleRuleTable([])
    if config.extra_rules_path is not None:
        table = table.merged(load_rule_table(config.extra_rules_path))
    return table


@lru_cache(maxsize=1)
def get_default_rule_table() -> LocaleRuleTable:
    """Process-wide table, loaded on first use and shared read-only."""
    return build_rule_table(get_settings().rules)
