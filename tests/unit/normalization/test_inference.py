"""Tests for locale inference."""

from recordkit.normalization import infer_countries
from recordkit.rules import FieldKind, LocaleRuleTable


class TestPhoneInference:
    """Tests for inference by calling code."""

    def test_unique_calling_code(self, rule_table: LocaleRuleTable) -> None:
        assert infer_countries(FieldKind.PHONE, "+54 9 11 4123 4567", rule_table) == ["AR"]

    def test_double_zero_prefix(self, rule_table: LocaleRuleTable) -> None:
        assert infer_countries(FieldKind.PHONE, "0056 2 2123 4567", rule_table) == ["CL"]

    def test_shared_calling_code_without_region(self, rule_table: LocaleRuleTable) -> None:
        """+1 with an unassigned area code can't be pinned to US or CA."""
        assert infer_countries(FieldKind.PHONE, "+1 555 555 5555", rule_table) == ["CA", "US"]

    def test_national_format_has_no_candidates(self, rule_table: LocaleRuleTable) -> None:
        assert infer_countries(FieldKind.PHONE, "(212) 555-1234", rule_table) == []

    def test_unregistered_calling_code(self, rule_table: LocaleRuleTable) -> None:
        assert infer_countries(FieldKind.PHONE, "+81 3 1234 5678", rule_table) == []

    def test_unparseable(self, rule_table: LocaleRuleTable) -> None:
        assert infer_countries(FieldKind.PHONE, "+", rule_table) == []


class TestShapeInference:
    """Tests for inference by accept pattern."""

    def test_canadian_postal_code(self, rule_table: LocaleRuleTable) -> None:
        assert infer_countries(FieldKind.POSTAL_CODE, "K1A 0B1", rule_table) == ["CA"]

    def test_dni(self, rule_table: LocaleRuleTable) -> None:
        assert infer_countries(FieldKind.NATIONAL_ID, "12345678Z", rule_table) == ["ES"]

    def test_formatted_cpf(self, rule_table: LocaleRuleTable) -> None:
        assert infer_countries(FieldKind.NATIONAL_ID, "529.982.247-25", rule_table) == ["BR"]

    def test_no_match(self, rule_table: LocaleRuleTable) -> None:
        assert infer_countries(FieldKind.POSTAL_CODE, "ABC", rule_table) == []


class TestAddressInference:
    """Tests for inference by province/state tokens."""

    def test_state_abbreviation(self, rule_table: LocaleRuleTable) -> None:
        value = "123 Main St, Springfield, IL 62701"
        assert infer_countries(FieldKind.STREET_ADDRESS, value, rule_table) == ["US"]

    def test_province_name_accent_insensitive(self, rule_table: LocaleRuleTable) -> None:
        value = "Av. Colón 500, Córdoba"
        assert infer_countries(FieldKind.STREET_ADDRESS, value, rule_table) == ["AR"]

    def test_lowercase_abbreviation_ignored(self, rule_table: LocaleRuleTable) -> None:
        """'in' is a word, not Indiana."""
        value = "Flat 2 in the old mill"
        assert infer_countries(FieldKind.STREET_ADDRESS, value, rule_table) == []

    def test_kind_without_country_rules(self, rule_table: LocaleRuleTable) -> None:
        assert infer_countries(FieldKind.EMAIL, "user@example.com", rule_table) == []
