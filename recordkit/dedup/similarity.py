"""String similarity and phonetic keys for duplicate review."""

import Levenshtein

from recordkit.rules import fold_accents

SOUNDEX_CODES = {
    **dict.fromkeys("BFPV", "1"),
    **dict.fromkeys("CGJKQSXZ", "2"),
    **dict.fromkeys("DT", "3"),
    "L": "4",
    **dict.fromkeys("MN", "5"),
    "R": "6",
}

# H and W don't separate letters with the same code
SOUNDEX_TRANSPARENT = frozenset("HW")


def soundex(token: str) -> str:
    """American Soundex code of a single word ("Robert" -> "R163")."""
    letters = [c for c in fold_accents(token).upper() if "A" <= c <= "Z"]
    if not letters:
        return ""

    code = [letters[0]]
    previous = SOUNDEX_CODES.get(letters[0], "")
    for letter in letters[1:]:
        digit = SOUNDEX_CODES.get(letter, "")
        if digit and digit != previous:
            code.append(digit)
        if letter not in SOUNDEX_TRANSPARENT:
            previous = digit
    return ("".join(code) + "000")[:4]


def phonetic_key(value: str) -> str:
    """Soundex of every token, space-joined ("Jon Smith" -> "J500 S530")."""
    codes = (soundex(token) for token in value.split())
    return " ".join(code for code in codes if code)


def _comparable(value: str) -> str:
    return " ".join(fold_accents(value).casefold().split())


def similarity(a: str, b: str) -> float:
    """Jaro-Winkler similarity in [0, 1], ignoring case and accents."""
    left, right = _comparable(a), _comparable(b)
    if left == right:
        return 1.0
    if not left or not right:
        return 0.0
    return float(Levenshtein.jaro_winkler(left, right))
