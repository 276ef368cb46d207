"""Tests for national significant digit extraction."""

import pytest

from recordkit.normalization.phones import fits_length, national_digits, rewrite_mobile_prefix
from recordkit.rules import LocaleRule


@pytest.fixture
def us_rule() -> LocaleRule:
    return LocaleRule(
        field_kind="phone",
        country="US",
        pattern=r".+",
        calling_code="1",
        length_min=10,
        length_max=10,
    )


@pytest.fixture
def de_rule() -> LocaleRule:
    return LocaleRule(
        field_kind="phone",
        country="DE",
        pattern=r".+",
        calling_code="49",
        trunk_prefix="0",
        length_min=6,
        length_max=11,
    )


class TestNationalDigits:
    """Tests for national_digits."""

    def test_plus_prefix(self, us_rule: LocaleRule) -> None:
        assert national_digits(us_rule, "+12125551234") == "2125551234"

    def test_double_zero_prefix(self, us_rule: LocaleRule) -> None:
        assert national_digits(us_rule, "0012125551234") == "2125551234"

    def test_bare_calling_code(self, us_rule: LocaleRule) -> None:
        assert national_digits(us_rule, "12125551234") == "2125551234"

    def test_national_number_untouched(self, us_rule: LocaleRule) -> None:
        assert national_digits(us_rule, "2125551234") == "2125551234"

    def test_other_calling_code(self, us_rule: LocaleRule) -> None:
        assert national_digits(us_rule, "+442079460018") is None

    def test_trunk_prefix(self, de_rule: LocaleRule) -> None:
        assert national_digits(de_rule, "030123456") == "30123456"

    def test_bare_code_kept_when_number_fits(self, de_rule: LocaleRule) -> None:
        """'4930123456' fits as a national number, so '49' is not stripped."""
        assert national_digits(de_rule, "4930123456") == "4930123456"


@pytest.fixture
def ar_rule() -> LocaleRule:
    return LocaleRule(
        field_kind="phone",
        country="AR",
        pattern=r".+",
        calling_code="54",
        trunk_prefix="0",
        length_min=10,
        length_max=11,
        mobile_prefix="15",
        mobile_marker="9",
    )


class TestMobilePrefix:
    """Tests for the domestic mobile prefix rewrite."""

    def test_buenos_aires_mobile(self, ar_rule: LocaleRule) -> None:
        assert national_digits(ar_rule, "011 15 1234-5678") == "91112345678"

    def test_three_digit_area_code(self, ar_rule: LocaleRule) -> None:
        assert national_digits(ar_rule, "0351 15 123 4567") == "93511234567"

    def test_without_trunk_prefix(self, ar_rule: LocaleRule) -> None:
        assert national_digits(ar_rule, "11 15 1234 5678") == "91112345678"

    def test_landline_untouched(self, ar_rule: LocaleRule) -> None:
        """A number that already fits keeps any '15' it contains."""
        assert national_digits(ar_rule, "011 1541-2345") == "1115412345"

    def test_unfixable_length_left_alone(self, ar_rule: LocaleRule) -> None:
        assert national_digits(ar_rule, "011 15 1234-56789") == "1115123456789"

    def test_rule_without_mobile_prefix(self, de_rule: LocaleRule) -> None:
        assert rewrite_mobile_prefix(de_rule, "301512345678") == "301512345678"


class TestFitsLength:
    """Tests for fits_length."""

    def test_bounds_inclusive(self, ar_rule: LocaleRule) -> None:
        assert fits_length(ar_rule, "1" * 10)
        assert fits_length(ar_rule, "1" * 11)

    def test_outside_bounds(self, ar_rule: LocaleRule) -> None:
        assert not fits_length(ar_rule, "1" * 9)
        assert not fits_length(ar_rule, "1" * 12)
