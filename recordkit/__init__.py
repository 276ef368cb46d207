"""recordkit: multi-locale standardization and validation of customer contact fields.

Typical use:

    from recordkit import CustomerRecord, RecordOrchestrator, RecordSchema

    record = CustomerRecord.from_dict(
        {"country": "US", "fields": {"phone": "(212) 555-1234"}}
    )
    report = RecordOrchestrator().process(record, RecordSchema(mandatory={"phone"}))
    report.is_valid
"""

from recordkit.dedup import DuplicateCandidate, find_duplicates, phonetic_key, similarity
from recordkit.errors import (
    ConfigFileError,
    RecordKitError,
    RuleConfigError,
    UnsupportedLocaleError,
    VerificationUnavailableError,
)
from recordkit.normalization import FieldNormalizer, NormalizedField, RawField, normalize
from recordkit.records import (
    CustomerRecord,
    FieldReport,
    RecordOrchestrator,
    RecordReport,
    RecordSchema,
)
from recordkit.rules import FieldKind, LocaleRule, LocaleRuleTable, get_default_rule_table
from recordkit.validation import FieldValidator, OutcomeStatus, ValidationOutcome, validate

__version__ = "0.1.0"

__all__ = [
    # Rules
    "FieldKind",
    "LocaleRule",
    "LocaleRuleTable",
    "get_default_rule_table",
    # Normalization
    "RawField",
    "NormalizedField",
    "FieldNormalizer",
    "normalize",
    # Validation
    "OutcomeStatus",
    "ValidationOutcome",
    "FieldValidator",
    "validate",
    # Records
    "CustomerRecord",
    "RecordSchema",
    "FieldReport",
    "RecordReport",
    "RecordOrchestrator",
    # Dedup
    "DuplicateCandidate",
    "find_duplicates",
    "phonetic_key",
    "similarity",
    # Errors
    "ConfigFileError",
    "RecordKitError",
    "RuleConfigError",
    "UnsupportedLocaleError",
    "VerificationUnavailableError",
]
