"""Exception hierarchy for recordkit.

Malformed input data is never raised: it is reported as a ValidationOutcome.
These exceptions cover configuration problems, programmer errors and
failing external collaborators.
"""

from pathlib import Path


class RecordKitError(Exception):
    """Base exception for all recordkit errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnsupportedLocaleError(RecordKitError):
    """Raised when no rule is registered for a (field kind, country) pair."""

    def __init__(self, field_kind: str, country: str | None) -> None:
        super().__init__(f"No rule registered for {field_kind}/{country or '*'}")
        self.field_kind = field_kind
        self.country = country


class RuleConfigError(RecordKitError):
    """Raised when a rule file is malformed."""

    def __init__(self, message: str, rule_index: int | None = None) -> None:
        super().__init__(message)
        self.rule_index = rule_index


class ConfigFileError(RecordKitError):
    """Raised when a configuration file cannot be parsed."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"Invalid configuration in {path}: {message}")
        self.path = path


class VerificationUnavailableError(RecordKitError):
    """Raised when an external verification collaborator keeps failing."""

    def __init__(self, collaborator: str, message: str) -> None:
        super().__init__(f"{collaborator} unavailable: {message}")
        self.collaborator = collaborator
