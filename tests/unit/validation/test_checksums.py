"""Tests for checksum algorithms."""

import pytest

from recordkit.validation import CHECKSUM_ALGORITHMS, ChecksumAlgorithm, register_checksum
from recordkit.validation.checksums import CpfMod11, CuitMod11, DniMod23, Luhn, RutMod11


class TestCuitMod11:
    """Tests for the CUIT/CUIL algorithm."""

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ("3012345678", "1"),
            ("2012345678", "6"),
            ("2012345670", "0"),  # 11 maps to 0
        ],
    )
    def test_compute(self, payload: str, expected: str) -> None:
        assert CuitMod11().compute(payload) == expected

    def test_remainder_ten_has_no_check_digit(self) -> None:
        assert CuitMod11().compute("2012345676") is None

    def test_wrong_payload_length(self) -> None:
        assert CuitMod11().compute("201234567") is None


class TestRutMod11:
    """Tests for the RUT algorithm."""

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [("12345678", "5"), ("7654321", "6"), ("1000005", "K")],
    )
    def test_compute(self, payload: str, expected: str) -> None:
        assert RutMod11().compute(payload) == expected

    def test_non_digit_payload(self) -> None:
        assert RutMod11().compute("12A45678") is None


class TestDniMod23:
    """Tests for the DNI control letter."""

    def test_compute(self) -> None:
        assert DniMod23().compute("12345678") == "Z"

    def test_zero(self) -> None:
        assert DniMod23().compute("00000000") == "T"


class TestCpfMod11:
    """Tests for the CPF algorithm."""

    def test_compute_two_digits(self) -> None:
        assert CpfMod11().compute("529982247") == "25"

    def test_repeated_digits_rejected(self) -> None:
        assert CpfMod11().compute("111111111") is None

    def test_split_uses_two_check_characters(self) -> None:
        assert CpfMod11().split("52998224725") == ("529982247", "25")


class TestLuhn:
    """Tests for the Luhn algorithm."""

    def test_compute(self) -> None:
        assert Luhn().compute("04645428") == "6"

    def test_card_number(self) -> None:
        assert Luhn().compute("7992739871") == "3"


class TestRegistry:
    """Tests for the algorithm registry."""

    def test_builtin_algorithms_registered(self) -> None:
        assert {"cuit_mod11", "rut_mod11", "dni_mod23", "cpf_mod11", "luhn"} <= set(
            CHECKSUM_ALGORITHMS
        )

    def test_register_custom_algorithm(self) -> None:
        class AlwaysSeven(ChecksumAlgorithm):
            name = "always_seven"

            def compute(self, payload: str) -> str | None:
                return "7"

        algorithm = register_checksum(AlwaysSeven())
        try:
            assert CHECKSUM_ALGORITHMS["always_seven"] is algorithm
        finally:
            CHECKSUM_ALGORITHMS.pop("always_seven")
