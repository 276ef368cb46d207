"""Checksum algorithm registry.

Each algorithm knows how many trailing check characters it protects and
computes them from the payload in front. Adding an algorithm means
registering it; the validator's control flow never changes.
"""

from abc import ABC, abstractmethod
from itertools import cycle

DNI_LETTERS = "TRWAGMYFPDXBNJZSQVHLCKE"

CUIT_WEIGHTS = (5, 4, 3, 2, 7, 6, 5, 4, 3, 2)


class ChecksumAlgorithm(ABC):
    """Computes the check characters of an identifier."""

    name: str
    check_length: int = 1

    @abstractmethod
    def compute(self, payload: str) -> str | None:
        """Expected check characters for a payload.

        Returns:
            The check characters, or None when the payload admits no valid
            check characters (or is malformed)
        """
        pass

    def split(self, significant: str) -> tuple[str, str]:
        """Split significant characters into (payload, supplied check)."""
        return significant[: -self.check_length], significant[-self.check_length :]


class CuitMod11(ChecksumAlgorithm):
    """Argentine CUIT/CUIL."""

    name = "cuit_mod11"

    def compute(self, payload: str) -> str | None:
        if len(payload) != len(CUIT_WEIGHTS) or not payload.isdigit():
            return None
        total = sum(int(d) * w for d, w in zip(payload, CUIT_WEIGHTS, strict=True))
        check = 11 - total % 11
        if check == 11:
            return "0"
        if check == 10:
            return None
        return str(check)


class RutMod11(ChecksumAlgorithm):
    """Chilean RUT/RUN: weights 2..7 cycling from the right, 10 -> K."""

    name = "rut_mod11"

    def compute(self, payload: str) -> str | None:
        if not payload.isdigit():
            return None
        total = sum(int(d) * w for d, w in zip(reversed(payload), cycle(range(2, 8))))
        check = 11 - total % 11
        if check == 11:
            return "0"
        if check == 10:
            return "K"
        return str(check)


class DniMod23(ChecksumAlgorithm):
    """Spanish DNI control letter."""

    name = "dni_mod23"

    def compute(self, payload: str) -> str | None:
        if not payload.isdigit():
            return None
        return DNI_LETTERS[int(payload) % 23]


class CpfMod11(ChecksumAlgorithm):
    """Brazilian CPF: two mod-11 check digits."""

    name = "cpf_mod11"
    check_length = 2

    @staticmethod
    def _digit(digits: str) -> str:
        start = len(digits) + 1
        total = sum(int(d) * w for d, w in zip(digits, range(start, 1, -1)))
        remainder = total * 10 % 11
        return "0" if remainder == 10 else str(remainder)

    def compute(self, payload: str) -> str | None:
        if len(payload) != 9 or not payload.isdigit():
            return None
        # 000.000.000-00, 111.111.111-11... pass the arithmetic but are never issued
        if len(set(payload)) == 1:
            return None
        first = self._digit(payload)
        return first + self._digit(payload + first)


class Luhn(ChecksumAlgorithm):
    """Luhn mod-10 (Canadian SIN, card numbers)."""

    name = "luhn"

    def compute(self, payload: str) -> str | None:
        if not payload.isdigit():
            return None
        total = 0
        for index, char in enumerate(reversed(payload)):
            digit = int(char)
            if index % 2 == 0:
                digit *= 2
                if digit > 9:
                    digit -= 9
            total += digit
        return str((10 - total % 10) % 10)


CHECKSUM_ALGORITHMS: dict[str, ChecksumAlgorithm] = {}


def register_checksum(algorithm: ChecksumAlgorithm) -> ChecksumAlgorithm:
    """Make an algorithm available to rules under its name."""
    CHECKSUM_ALGORITHMS[algorithm.name] = algorithm
    return algorithm


for _algorithm in (CuitMod11(), RutMod11(), DniMod23(), CpfMod11(), Luhn()):
    register_checksum(_algorithm)
