"""Pipeline configuration models.

Covers the rule table source, record processing defaults, duplicate
review thresholds and external verification behavior.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class RulesConfig(BaseModel):
    """Where locale rules come from."""

    include_defaults: bool = Field(
        default=True,
        description="Load the rule set shipped with recordkit",
    )
    extra_rules_path: Path | None = Field(
        default=None,
        description="Additional TOML rule file merged over the defaults",
    )


class PipelineConfig(BaseModel):
    """Record processing defaults."""

    default_country: str | None = Field(
        default=None,
        description="Country hint used when neither field nor record declares one",
    )
    mandatory_fields: list[str] = Field(
        default_factory=list,
        description="Field kinds required in every record (empty: all present fields)",
    )
    max_workers: int = Field(
        default=4,
        gt=0,
        description="Worker threads for batch processing",
    )

    @field_validator("default_country")
    @classmethod
    def upper_country(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class DedupConfig(BaseModel):
    """Duplicate detection defaults for the CLI."""

    review_threshold: float = Field(
        default=0.85,
        ge=0.0,
        le=1.0,
        description="Similarity at or above which a pair is flagged for review",
    )


class VerificationConfig(BaseModel):
    """External verification collaborator behavior."""

    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for one collaborator call",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per collaborator call before giving up",
    )
    block_on_failure: bool = Field(
        default=False,
        description="Downgrade fields that fail external verification to ambiguous",
    )
