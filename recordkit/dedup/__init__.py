"""Duplicate/similarity helper."""

from recordkit.dedup.candidates import DuplicateCandidate, find_duplicates
from recordkit.dedup.similarity import phonetic_key, similarity, soundex

__all__ = [
    "DuplicateCandidate",
    "find_duplicates",
    "phonetic_key",
    "similarity",
    "soundex",
]
