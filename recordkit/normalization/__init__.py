"""Field normalizers.

Pure, locale-aware functions turning raw field values into canonical
strings. Nothing here performs I/O beyond the one-time rule table load.
"""

from recordkit.normalization.inference import infer_countries
from recordkit.normalization.models import NormalizationFallback, NormalizedField, RawField
from recordkit.normalization.normalizer import FieldNormalizer, normalize

__all__ = [
    "FieldNormalizer",
    "NormalizationFallback",
    "NormalizedField",
    "RawField",
    "infer_countries",
    "normalize",
]
