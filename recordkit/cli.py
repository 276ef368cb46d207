"""recordkit command-line interface.

    recordkit process customers.jsonl --country AR --mandatory national_id
    recordkit rules --kind phone
    recordkit dedup customers.jsonl --kind personal_name --threshold 0.9
"""

import json
from datetime import date
from pathlib import Path
from typing import Any

import typer

from recordkit.config import Settings, get_settings
from recordkit.dedup import find_duplicates
from recordkit.errors import ConfigFileError, RuleConfigError
from recordkit.observability.logging import get_logger, setup_logging
from recordkit.records import CustomerRecord, RecordOrchestrator, RecordReport, RecordSchema
from recordkit.rules import FieldKind, get_default_rule_table

app = typer.Typer(help="Standardize and validate customer contact fields.")

logger = get_logger(__name__)


def _load_settings() -> Settings:
    try:
        settings = get_settings()
    except ConfigFileError as e:
        typer.echo(f"Configuration error: {e.message}", err=True)
        raise typer.Exit(code=2) from e
    _configure(settings)
    return settings


def _configure(settings: Settings) -> None:
    log = settings.observability.logging
    setup_logging(level=log.level, format=log.format, redact_pii=log.redact_pii)


def _parse_kind(value: str) -> FieldKind:
    kind = FieldKind.parse(value)
    if kind is None:
        choices = ", ".join(k.value for k in FieldKind)
        raise typer.BadParameter(f"unknown field kind {value!r} (choose from {choices})")
    return kind


def _read_records(path: Path) -> list[CustomerRecord]:
    """Read a JSON array, a single JSON object or JSON lines."""
    if not path.exists():
        typer.echo(f"Input not found: {path}", err=True)
        raise typer.Exit(code=1)

    text = path.read_text(encoding="utf-8")
    try:
        stripped = text.lstrip()
        if stripped.startswith("["):
            items: list[Any] = json.loads(text)
        elif stripped.startswith("{") and "\n{" not in stripped:
            items = [json.loads(text)]
        else:
            items = [json.loads(line) for line in text.splitlines() if line.strip()]
    except json.JSONDecodeError as e:
        typer.echo(f"Invalid JSON in {path}: {e}", err=True)
        raise typer.Exit(code=1) from e

    return [CustomerRecord.from_dict(item) for item in items]


def _run(
    records: list[CustomerRecord],
    schema: RecordSchema | None,
    workers: int | None,
) -> list[RecordReport]:
    try:
        orchestrator = RecordOrchestrator()
    except RuleConfigError as e:
        typer.echo(f"Rule configuration error: {e.message}", err=True)
        raise typer.Exit(code=2) from e
    return orchestrator.process_batch(records, schema, max_workers=workers)


@app.command()
def process(
    input_path: Path = typer.Argument(..., help="JSON array or JSON-lines file of records."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write JSON-lines reports here instead of stdout."
    ),
    country: str | None = typer.Option(
        None, "--country", "-c", help="Default country for records without one."
    ),
    mandatory: list[str] | None = typer.Option(
        None, "--mandatory", "-m", help="Required field kind (repeatable)."
    ),
    workers: int | None = typer.Option(None, "--workers", "-w", min=1, help="Worker threads."),
) -> None:
    """Normalize and validate every record and print one report per line."""
    settings = _load_settings()

    required = mandatory or settings.pipeline.mandatory_fields
    schema = RecordSchema(
        mandatory=frozenset(_parse_kind(kind).value for kind in required) if required else None,
        default_country=country.upper() if country else settings.pipeline.default_country,
    )

    records = _read_records(input_path)
    reports = _run(records, schema, workers)

    lines = [json.dumps(report.to_dict(), ensure_ascii=False) for report in reports]
    if output is not None:
        output.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
    else:
        for line in lines:
            typer.echo(line)

    valid = sum(1 for report in reports if report.is_valid)
    typer.echo(f"{valid}/{len(reports)} records valid", err=True)


@app.command()
def rules(
    kind: str | None = typer.Option(None, "--kind", "-k", help="Only list this field kind."),
) -> None:
    """List the active locale rule table."""
    settings = _load_settings()

    selected = _parse_kind(kind) if kind else None
    try:
        table = get_default_rule_table()
    except RuleConfigError as e:
        typer.echo(f"Rule configuration error: {e.message}", err=True)
        raise typer.Exit(code=2) from e

    listed = sorted(
        (rule for rule in table if selected is None or rule.field_kind == selected),
        key=lambda rule: (rule.field_kind.value, rule.country, rule.effective_from or date.min),
    )
    for rule in listed:
        typer.echo(
            "\t".join([
                rule.field_kind.value,
                rule.country,
                rule.canonical_template or "-",
                rule.checksum_algorithm or "-",
                rule.pattern,
            ])
        )


@app.command()
def dedup(
    input_path: Path = typer.Argument(..., help="JSON array or JSON-lines file of records."),
    kind: str = typer.Option(..., "--kind", "-k", help="Field kind to compare."),
    threshold: float | None = typer.Option(
        None, "--threshold", "-t", min=0.0, max=1.0, help="Similarity threshold."
    ),
    country: str | None = typer.Option(
        None, "--country", "-c", help="Default country for records without one."
    ),
) -> None:
    """Print pairs of records that may be duplicates, for manual review."""
    settings = _load_settings()

    field_kind = _parse_kind(kind)
    cutoff = threshold if threshold is not None else settings.dedup.review_threshold

    records = _read_records(input_path)
    schema = RecordSchema(default_country=country.upper() if country else None)
    reports = _run(records, schema, None)

    candidates = find_duplicates(reports, field_kind, cutoff)
    for candidate in candidates:
        typer.echo(json.dumps(candidate.model_dump(mode="json"), ensure_ascii=False))
    logger.info("dedup_finished", field_kind=field_kind.value, candidates=len(candidates))
