"""Case policies for names, companies and addresses.

All functions take whitespace-collapsed text and are idempotent.
"""

import re

from recordkit.rules import LocaleRule, TokenTable, token_key

# Hyphen and apostrophe join independently capitalized parts: Jean-Luc, O'Brien
PART_SEPARATORS = re.compile(r"([-'])")

TRAILING_PUNCTUATION = ".,"


def capitalize_word(word: str) -> str:
    """Capitalize each hyphen/apostrophe-joined part of a word.

    A trailing possessive "'s" stays lowercase ("Macy's").
    """
    parts = PART_SEPARATORS.split(word.lower())
    out: list[str] = []
    for index, part in enumerate(parts):
        is_possessive = (
            part == "s" and index == len(parts) - 1 and index > 0 and parts[index - 1] == "'"
        )
        if part in ("-", "'") or is_possessive:
            out.append(part)
        else:
            out.append(part[:1].upper() + part[1:])
    return "".join(out)


def name_case(value: str, tokens: TokenTable) -> str:
    """Personal-name casing: particles lowercase in any position, every other
    word capitalized ("de la cruz" -> "de la Cruz").
    """
    return " ".join(
        word.lower() if tokens.is_particle(word) else capitalize_word(word)
        for word in value.split(" ")
    )


def title_case(value: str, tokens: TokenTable) -> str:
    """Title casing for company names and street addresses.

    Known acronyms render uppercase, particles lowercase (except in first
    position) and tokens beginning with a digit lowercase ("5th", "12b").
    """
    words = value.split(" ")
    out: list[str] = []
    for index, word in enumerate(words):
        if tokens.is_acronym(word):
            out.append(word.upper())
        elif index > 0 and tokens.is_particle(word):
            out.append(word.lower())
        elif word[:1].isdigit():
            out.append(word.lower())
        else:
            out.append(capitalize_word(word))
    return " ".join(out)


def split_legal_suffix(value: str, tokens: TokenTable) -> tuple[str, str | None]:
    """Separate a trailing legal-entity suffix from a company name.

    "Acme Widgets, s.a." -> ("Acme Widgets", "S.A.")

    Returns:
        (name without suffix, canonical suffix or None)
    """
    words = value.split(" ")
    match = tokens.match_legal_suffix(words)
    if match is None:
        return value, None

    canonical, size = match
    name = " ".join(words[:-size]).rstrip(" ,&-")
    if not name:
        return value, None
    return name, canonical


def _abbreviation_lookup(rule: LocaleRule) -> dict[str, str]:
    lookup = {token_key(value): value for value in rule.abbreviations.values()}
    lookup.update({token_key(key): value for key, value in rule.abbreviations.items()})
    return lookup


def address_case(value: str, rule: LocaleRule, tokens: TokenTable) -> str:
    """Title-case an address, abbreviate street words and uppercase regions.

    A region abbreviation ("NY", "ON") is uppercased when it follows a comma,
    which keeps "Oak Ct" from turning into "Oak CT".
    """
    abbreviations = _abbreviation_lookup(rule)
    regions = {token for token in rule.region_tokens if len(token) <= 3}

    words = title_case(value, tokens).split(" ")
    out: list[str] = []
    for index, word in enumerate(words):
        core = word.rstrip(TRAILING_PUNCTUATION)
        comma = "," if word.endswith(",") else ""

        replacement = abbreviations.get(token_key(core)) if core else None
        if core.upper() in regions and index > 0 and out[index - 1].endswith(","):
            word = core.upper() + word[len(core):]
        elif replacement is not None and not core[:1].isdigit():
            word = replacement + comma
        out.append(word)
    return " ".join(out)
