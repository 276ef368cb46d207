"""Canonical template mini-language.

A template describes the canonical layout of a field's significant
characters:

    N   one digit
    A   one letter
    X   one letter or digit
    *   every remaining significant character (leaves room for the fixed tail)
    \\   the next character is a literal
    |   separates alternatives, tried in order

Any other character is emitted literally. Examples:

    "NN-NNNNNNNN-N"       20123456789 -> 20-12345678-9
    "* NAA"               SW1A1AA     -> SW1A 1AA
    "NNNNN|NNNNN-NNNN"    100011234   -> 10001-1234
"""

from functools import lru_cache

SLOT_CHARS = frozenset("NAX")


def _slot_accepts(slot: str, char: str) -> bool:
    if slot == "N":
        return "0" <= char <= "9"
    if slot == "A":
        return char.isalpha()
    return char.isalnum()


@lru_cache(maxsize=256)
def parse_template(template: str) -> tuple[tuple[tuple[str, str], ...], ...]:
    """Parse a template into alternatives of (token_type, char) tuples.

    token_type is "slot", "rest" or "literal".
    """
    alternatives: list[tuple[tuple[str, str], ...]] = []
    current: list[tuple[str, str]] = []
    escaped = False
    for char in template:
        if escaped:
            current.append(("literal", char))
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "|":
            alternatives.append(tuple(current))
            current = []
        elif char in SLOT_CHARS:
            current.append(("slot", char))
        elif char == "*":
            current.append(("rest", char))
        else:
            current.append(("literal", char))
    if escaped:
        raise ValueError(f"Template ends with a dangling escape: {template!r}")
    alternatives.append(tuple(current))
    for alternative in alternatives:
        if sum(1 for kind, _ in alternative if kind == "rest") > 1:
            raise ValueError(f"Template alternative has more than one '*': {template!r}")
    return tuple(alternatives)


def _fill_alternative(tokens: tuple[tuple[str, str], ...], chars: str) -> str | None:
    slots = sum(1 for kind, _ in tokens if kind == "slot")
    has_rest = any(kind == "rest" for kind, _ in tokens)
    rest_len = len(chars) - slots
    if has_rest and rest_len < 1:
        return None
    if not has_rest and rest_len != 0:
        return None

    out: list[str] = []
    position = 0
    for kind, symbol in tokens:
        if kind == "literal":
            out.append(symbol)
        elif kind == "slot":
            char = chars[position]
            if not _slot_accepts(symbol, char):
                return None
            out.append(char)
            position += 1
        else:
            chunk = chars[position:position + rest_len]
            if not chunk.isalnum():
                return None
            out.append(chunk)
            position += rest_len
    return "".join(out)


def fill_template(template: str, chars: str) -> str | None:
    """Lay out significant characters according to a template.

    Args:
        template: Canonical template
        chars: Significant characters (letters and digits only)

    Returns:
        The canonical string, or None when no alternative fits
    """
    for tokens in parse_template(template):
        filled = _fill_alternative(tokens, chars)
        if filled is not None:
            return filled
    return None
