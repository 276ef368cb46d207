"""Tests for case policies."""

import pytest

from recordkit.normalization.casing import (
    address_case,
    capitalize_word,
    name_case,
    split_legal_suffix,
    title_case,
)
from recordkit.rules import LocaleRule, TokenTable


@pytest.fixture
def tokens() -> TokenTable:
    return TokenTable.from_mapping({
        "particles": ["de", "del", "la", "van", "der"],
        "acronyms": ["IBM", "YPF"],
        "legal_suffixes": {"S.A.": ["sa"], "Inc.": ["inc"]},
    })


class TestCapitalizeWord:
    """Tests for capitalize_word."""

    def test_hyphenated_parts(self) -> None:
        assert capitalize_word("JEAN-LUC") == "Jean-Luc"

    def test_apostrophe_parts(self) -> None:
        assert capitalize_word("d'angelo") == "D'Angelo"

    def test_possessive_stays_lowercase(self) -> None:
        assert capitalize_word("MACY'S") == "Macy's"

    def test_initial_with_dot(self) -> None:
        assert capitalize_word("j.") == "J."


class TestNameCase:
    """Tests for personal-name casing."""

    def test_particles_lowercase_after_first_word(self, tokens: TokenTable) -> None:
        assert name_case("LUDWIG VAN BEETHOVEN", tokens) == "Ludwig van Beethoven"

    def test_leading_particle_stays_lowercase(self, tokens: TokenTable) -> None:
        assert name_case("DE LA CRUZ", tokens) == "de la Cruz"

    def test_leading_particle_idempotent(self, tokens: TokenTable) -> None:
        assert name_case(name_case("Van Der Berg", tokens), tokens) == "van der Berg"


class TestTitleCase:
    """Tests for title casing."""

    def test_acronyms_uppercase(self, tokens: TokenTable) -> None:
        assert title_case("ypf energia", tokens) == "YPF Energia"

    def test_digit_tokens_lowercase(self, tokens: TokenTable) -> None:
        assert title_case("5TH AVENUE", tokens) == "5th Avenue"

    def test_leading_particle_capitalized(self, tokens: TokenTable) -> None:
        assert title_case("de la plata motors", tokens) == "De la Plata Motors"


class TestSplitLegalSuffix:
    """Tests for split_legal_suffix."""

    def test_comma_before_suffix_dropped(self, tokens: TokenTable) -> None:
        assert split_legal_suffix("Acme, Inc.", tokens) == ("Acme", "Inc.")

    def test_no_suffix(self, tokens: TokenTable) -> None:
        assert split_legal_suffix("Acme Widgets", tokens) == ("Acme Widgets", None)

    def test_suffix_only(self, tokens: TokenTable) -> None:
        assert split_legal_suffix("Inc.", tokens) == ("Inc.", None)


class TestAddressCase:
    """Tests for address canonicalization."""

    @pytest.fixture
    def rule(self) -> LocaleRule:
        return LocaleRule(
            field_kind="street_address",
            country="US",
            pattern=r".+",
            region_tokens=("NY", "CT", "New York"),
            abbreviations={"street": "St", "court": "Ct", "avenue": "Ave"},
        )

    def test_abbreviations_applied(self, rule: LocaleRule, tokens: TokenTable) -> None:
        assert address_case("12 oak court", rule, tokens) == "12 Oak Ct"

    def test_abbreviation_keeps_trailing_comma(
        self, rule: LocaleRule, tokens: TokenTable
    ) -> None:
        assert address_case("12 oak street, albany, ny", rule, tokens) == "12 Oak St, Albany, NY"

    def test_region_needs_preceding_comma(self, rule: LocaleRule, tokens: TokenTable) -> None:
        """'Ct' as a street type isn't mistaken for Connecticut."""
        assert address_case("12 elm ct", rule, tokens) == "12 Elm Ct"
        assert address_case("12 elm st, hartford, ct", rule, tokens) == "12 Elm St, Hartford, CT"

    def test_abbreviated_input_is_stable(self, rule: LocaleRule, tokens: TokenTable) -> None:
        assert address_case("12 Oak St.", rule, tokens) == "12 Oak St"
