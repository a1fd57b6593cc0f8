import sys
from pathlib import Path

import orjson
import typer
from rich.console import Console

from pointgen.config import EnrichmentConfig, load_config, resolve_api_key
from pointgen.enrich import decode_enrichment
from pointgen.parser import parse_raw_details
from pointgen.pipeline import ERROR_PREFIX, generate_point_file, render_from_text
from pointgen.records import records_to_rows, write_records_csv

app = typer.Typer(help="Generate point files from parameter tables.")
console = Console()
SUPPORTED_FORMATS = {"json", "csv"}


def _read_text(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    if not path.is_file():
        raise typer.BadParameter(f"Input file not found: {path}")
    return path.read_text()


def _load_config(config: Path | None, api_key: str | None) -> EnrichmentConfig:
    cfg = EnrichmentConfig()
    if config:
        try:
            cfg = load_config(config)
        except (FileNotFoundError, ValueError) as exc:
            raise typer.BadParameter(str(exc)) from exc
    cfg.api_key = resolve_api_key(api_key or cfg.api_key)
    return cfg


@app.command()
def generate(
    input: Path = typer.Argument(..., help="Parameter table (.txt), or - for stdin."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write the point file."
    ),
    enrich: bool = typer.Option(
        False, "--enrich/--no-enrich", help="Reconcile records with the enrichment service."
    ),
    api_key: str | None = typer.Option(
        None, "--api-key", help="Enrichment service key (defaults to OPENAI_API_KEY)."
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="YAML/JSON enrichment settings."
    ),
    response: Path | None = typer.Option(
        None, "--response", "-r", help="Merge a saved enrichment response instead of calling out."
    ),
) -> None:
    """Render a point file, optionally enriched."""
    text = _read_text(input)
    if response:
        result = render_from_text(text, enrichment=_read_text(response))
    else:
        cfg = _load_config(config, api_key)
        if enrich and not cfg.api_key:
            console.print("[yellow]No API key found; generating without enrichment.[/]")
        result = generate_point_file(text, use_enrichment=enrich, config=cfg)
        if result.startswith(ERROR_PREFIX):
            console.print(result, markup=False, emoji=False, highlight=False)
            raise typer.Exit(code=1)

    if output:
        output.write_text(result + "\n" if result else "")
        lines = len(result.splitlines())
        console.print(f"[bold green]Wrote[/] {lines} points to {output}")
    else:
        console.print(result, markup=False, emoji=False, highlight=False, soft_wrap=True)


@app.command()
def parse(
    input: Path = typer.Argument(..., help="Parameter table (.txt), or - for stdin."),
    format: str = typer.Option("json", "--format", "-f", help="Output format: json | csv."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write parsed records."
    ),
) -> None:
    """Dump parsed records without rendering them."""
    fmt = format.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise typer.BadParameter(f"Unsupported format '{format}'. Choose from {SUPPORTED_FORMATS}.")

    records = parse_raw_details(_read_text(input))
    if fmt == "csv":
        if not output:
            raise typer.BadParameter("CSV output requires --output.")
        write_records_csv(output, records)
        console.print(f"[bold green]Wrote[/] {len(records)} records to {output}")
        return

    payload = orjson.dumps(records_to_rows(records), option=orjson.OPT_INDENT_2)
    if output:
        output.write_bytes(payload)
        console.print(f"[bold green]Wrote[/] {len(records)} records to {output}")
    else:
        console.print(payload.decode(), markup=False, emoji=False, highlight=False, soft_wrap=True)


@app.command()
def inspect(
    response: Path = typer.Argument(..., help="Saved enrichment service response."),
) -> None:
    """Report whether a saved enrichment response can be merged."""
    outcome = decode_enrichment(_read_text(response))
    payload = {
        "decoded": outcome.decoded,
        "reason": outcome.reason,
        "group": outcome.group,
        "parameters": len(outcome.parameters),
        "offsets": [p.offset for p in outcome.parameters],
    }
    console.print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode(), markup=False)


if __name__ == "__main__":
    app()
