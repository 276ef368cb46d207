"""Token classification table.

Particles in personal names, legal-entity suffixes in company names and
known acronyms are the same problem: a known token drives how a word is
rendered. One table answers all three questions.
"""

import unicodedata
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from recordkit.rules.enums import TokenClass

MAX_SUFFIX_TOKENS = 4


def fold_accents(value: str) -> str:
    """Strip combining marks: 'Córdoba' -> 'Cordoba'."""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def token_key(value: str) -> str:
    """Comparison key for a token or token run: folded, casefolded, alphanumeric only."""
    return "".join(c for c in fold_accents(value).casefold() if c.isalnum())


class TokenTable(BaseModel):
    """Known tokens and how they classify."""

    model_config = ConfigDict(frozen=True)

    particles: frozenset[str] = Field(
        default_factory=frozenset,
        description="Lowercase name particles, compared casefolded",
    )
    acronyms: frozenset[str] = Field(
        default_factory=frozenset,
        description="Token keys rendered uppercase",
    )
    legal_suffixes: dict[str, str] = Field(
        default_factory=dict,
        description="Variant key -> canonical legal-entity suffix",
    )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TokenTable":
        """Build a table from the [tokens] section of a rule file.

        legal_suffixes maps each canonical suffix to its accepted variants;
        the canonical spelling is always accepted too.
        """
        suffixes: dict[str, str] = {}
        for canonical, variants in dict(data.get("legal_suffixes", {})).items():
            for variant in [canonical, *variants]:
                key = token_key(variant)
                if key:
                    suffixes[key] = canonical
        return cls(
            particles=frozenset(p.casefold() for p in data.get("particles", [])),
            acronyms=frozenset(token_key(a) for a in data.get("acronyms", [])),
            legal_suffixes=suffixes,
        )

    def merged(self, other: "TokenTable") -> "TokenTable":
        """Union of both tables; other wins on conflicting suffix variants."""
        return TokenTable(
            particles=self.particles | other.particles,
            acronyms=self.acronyms | other.acronyms,
            legal_suffixes={**self.legal_suffixes, **other.legal_suffixes},
        )

    def is_particle(self, token: str) -> bool:
        return token.casefold() in self.particles

    def is_acronym(self, token: str) -> bool:
        key = token_key(token)
        return bool(key) and key in self.acronyms

    def classify(self, token: str) -> TokenClass:
        """Classify a single token."""
        if self.is_particle(token):
            return TokenClass.PARTICLE
        if token_key(token) in self.legal_suffixes:
            return TokenClass.LEGAL_SUFFIX
        if self.is_acronym(token):
            return TokenClass.ACRONYM
        return TokenClass.WORD

    def match_legal_suffix(self, tokens: Sequence[str]) -> tuple[str, int] | None:
        """Find a legal-entity suffix at the end of a token list.

        Longer runs win ("S.A. de C.V." over "C.V."). At least one token must
        remain in front of the suffix.

        Returns:
            (canonical suffix, number of trailing tokens it spans) or None
        """
        longest = min(MAX_SUFFIX_TOKENS, len(tokens) - 1)
        for size in range(longest, 0, -1):
            key = token_key("".join(tokens[-size:]))
            canonical = self.legal_suffixes.get(key)
            if canonical is not None:
                return canonical, size
        return None
