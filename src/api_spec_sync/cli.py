"""CLI entry point for api-spec-sync."""

import logging
from pathlib import Path

import click

from api_spec_sync.config import Config, load_config
from api_spec_sync.errors import SpecSyncError
from api_spec_sync.model.document import Document
from api_spec_sync.spec.builder import Builder
from api_spec_sync.spec.codec import detect_format, dump_document, load_document, load_records, write_document
from api_spec_sync.spec.differ import ChangeType, Differ, DiffResult, filter_changes, format_diff
from api_spec_sync.spec.merger import MergeResult, MergeStrategy, Merger

EXIT_MATCH = 0
EXIT_DIFFERENCE = 1
EXIT_CHECK_ERROR = 2

PRESERVE_FLAGS = ("descriptions", "examples", "tags", "extensions", "info", "servers", "security")

SYMBOLS = {ChangeType.ADDED: "+", ChangeType.REMOVED: "-", ChangeType.MODIFIED: "~"}


def _read_spec(file_path: Path) -> Document:
    try:
        return load_document(file_path)
    except SpecSyncError as e:
        raise click.ClickException(str(e)) from e


def _build_from_records(config: Config, records_path: Path) -> Document:
    """Load extractor records and build a spec from them."""
    try:
        routes, schemas = load_records(records_path)
        return Builder(config).build(routes, schemas)
    except SpecSyncError as e:
        raise click.ClickException(str(e)) from e


def _echo_manifest(result: MergeResult, err: bool = False) -> None:
    sections = (
        ("Added paths", result.added_paths),
        ("Removed paths", result.removed_paths),
        ("Updated paths", result.updated_paths),
        ("Added schemas", result.added_schemas),
        ("Removed schemas", result.removed_schemas),
        ("Updated schemas", result.updated_schemas),
    )
    if result.is_empty():
        click.echo("No paths or schemas added or removed.", err=err)
    for title, items in sections:
        if items:
            click.echo(f"{title}:", err=err)
            for item in items:
                click.echo(f"  {item}", err=err)


def _echo_changes(result: DiffResult) -> None:
    if result.path_changes:
        click.echo("Path changes:")
        for c in result.sorted_path_changes():
            click.echo(f"  {SYMBOLS[c.type]} {c.method} {c.path}")
    if result.schema_changes:
        click.echo("Schema changes:")
        for c in result.sorted_schema_changes():
            click.echo(f"  {SYMBOLS[c.type]} {c.name}")


@click.group()
@click.option("-c", "--config", "config_path", default=None, type=click.Path(path_type=Path), help="Config file (default: specsync.yaml in the current directory).")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool):
    """API Spec Sync: keep a generated OpenAPI spec in step with hand-edited docs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx.obj = load_config(config_path, search_dir=Path.cwd())
    except SpecSyncError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.argument("records_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output spec file (default: configured output).")
@click.option("--format", "fmt", default=None, type=click.Choice(["yaml", "json"]), help="Output format (default: from config, or from the extension of --output).")
@click.option("--merge/--no-merge", default=None, help="Merge with the existing output file (default: generation.merge).")
@click.option("--dry-run", is_flag=True, help="Print the spec instead of writing it.")
@click.pass_obj
def build(config: Config, records_path: Path, output: Path | None, fmt: str | None, merge: bool | None, dry_run: bool):
    """Build an OpenAPI spec from an extractor records file."""
    if output is None:
        output = Path(config.output)
        fmt = fmt or config.format
    fmt = fmt or detect_format(output)
    if merge is None:
        merge = config.generation.merge

    doc = _build_from_records(config, records_path)

    if merge and output.exists():
        click.echo(f"Merging with existing spec {output}...", err=True)
        result = Merger(config.merge).merge_with_result(_read_spec(output), doc)
        _echo_manifest(result, err=True)
        doc = result.document

    if dry_run:
        click.echo(dump_document(doc, fmt), nl=False)
        return

    write_document(doc, output, fmt)
    click.echo(f"OpenAPI specification written to {output}")


@main.command("diff")
@click.argument("old_path", type=click.Path(exists=True, path_type=Path))
@click.argument("new_path", type=click.Path(exists=True, path_type=Path))
@click.option("--ignore", multiple=True, help="Path or schema pattern to ignore (repeatable).")
def diff_cmd(old_path: Path, new_path: Path, ignore: tuple[str, ...]):
    """Compare two OpenAPI specifications."""
    result = Differ().diff(_read_spec(old_path), _read_spec(new_path))
    result = filter_changes(result, ignore)

    click.echo(f"--- {old_path}")
    click.echo(f"+++ {new_path}")
    click.echo()
    click.echo(format_diff(result), nl=False)
    if result.has_breaking_changes:
        click.echo("WARNING: Breaking changes detected!")


@main.command()
@click.argument("spec_path", type=click.Path(path_type=Path))
@click.argument("records_path", type=click.Path(path_type=Path))
@click.option("--ignore", multiple=True, help="Path or schema pattern to ignore (repeatable).")
@click.option("--ci", is_flag=True, help="Exit 2 on analysis errors instead of printing a usage error.")
@click.pass_context
def check(ctx: click.Context, spec_path: Path, records_path: Path, ignore: tuple[str, ...], ci: bool):
    """Check that SPEC_PATH matches the spec built from RECORDS_PATH.

    Exit codes: 0 in sync, 1 differs (or spec missing), 2 analysis error (--ci).
    """
    config: Config = ctx.obj
    if not spec_path.exists():
        click.echo(f"Spec file not found: {spec_path}", err=True)
        click.echo("Run 'specsync build' first to create the spec file", err=True)
        ctx.exit(EXIT_DIFFERENCE)

    try:
        existing = load_document(spec_path)
        routes, schemas = load_records(records_path)
        generated = Builder(config).build(routes, schemas)
    except SpecSyncError as e:
        if ci:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(EXIT_CHECK_ERROR)
        raise click.ClickException(str(e)) from e

    result = filter_changes(Differ().diff(existing, generated), ignore)
    if result.is_empty():
        click.echo("Spec is in sync with implementation")
        return

    click.echo("Spec differs from implementation:")
    click.echo(result.summary)
    click.echo()
    _echo_changes(result)
    if result.has_breaking_changes:
        click.echo("Breaking changes detected!", err=True)
    ctx.exit(EXIT_DIFFERENCE)


@main.command()
@click.argument("existing_path", type=click.Path(exists=True, path_type=Path))
@click.argument("generated_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the merged spec.")
@click.option("--format", "fmt", default=None, type=click.Choice(["yaml", "json"]), help="Output format (default: from extension).")
@click.option("--strategy", default=None, type=click.Choice([s.value for s in MergeStrategy]), help="Conflict strategy.")
@click.option("--mark-deprecated/--drop-removed", "mark_deprecated", default=None, help="Keep removed paths as deprecated operations.")
@click.option("--no-preserve", "disabled", multiple=True, type=click.Choice(PRESERVE_FLAGS), help="Stop preserving existing content of this kind (repeatable).")
@click.pass_obj
def merge(
    config: Config,
    existing_path: Path,
    generated_path: Path,
    output: Path,
    fmt: str | None,
    strategy: str | None,
    mark_deprecated: bool | None,
    disabled: tuple[str, ...],
):
    """Merge a generated spec into an existing hand-edited spec."""
    updates = {f"preserve_{name}": False for name in disabled}
    if strategy is not None:
        updates["conflict_strategy"] = MergeStrategy(strategy)
    if mark_deprecated is not None:
        updates["mark_removed_as_deprecated"] = mark_deprecated
    options = config.merge.model_copy(update=updates)

    result = Merger(options).merge_with_result(_read_spec(existing_path), _read_spec(generated_path))
    write_document(result.document, output, fmt)

    _echo_manifest(result)
    click.echo(f"Merged specification written to {output}")
