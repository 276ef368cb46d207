"""Configuration model exports.

    from recordkit.config.models import PipelineConfig, VerificationConfig
"""

from recordkit.config.models.observability import LoggingConfig, ObservabilityConfig
from recordkit.config.models.pipeline import (
    DedupConfig,
    PipelineConfig,
    RulesConfig,
    VerificationConfig,
)

__all__ = [
    # Observability
    "LoggingConfig",
    "ObservabilityConfig",
    # Pipeline
    "DedupConfig",
    "PipelineConfig",
    "RulesConfig",
    "VerificationConfig",
]
