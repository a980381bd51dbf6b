"""FakeForge command-line interface."""

import os
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fakeforge import __version__
from fakeforge.classifier import OpenAIClassifier
from fakeforge.config import GenerationConfig, load_config
from fakeforge.errors import ClassifierError, ForgeError
from fakeforge.generator import ForgeEngine
from fakeforge.inference import FieldTypeInference
from fakeforge.log import setup_logging
from fakeforge.parsers import parse_schema
from fakeforge.schema import Table as SchemaTable


console = Console()

app = typer.Typer(
    help="Generate fake CSV/JSON data from JSON field lists or SQL CREATE TABLE schemas.",
    no_args_is_help=True,
)

SUPPORTED_TYPES = """Supported field types:
  Basic: string, int, float, boolean, date, datetime
  Identity: email, name, firstname, lastname, username, uuid
  Contact: phone, address, city, state, zipcode, country
  Business: company, jobtitle, department, category, price
  Technical: url, image, ipaddress, macaddress, version, filename
  Security: password, creditcard, bankaccount, ssn, license
  Content: text, hashtag, color, product, brand, skill
  Measurements: age, height, weight, temperature, longitude, latitude
  System: status, priority, duration, gender"""


def _ai_status() -> str:
    if os.environ.get("OPENAI_API_KEY"):
        return "Available"
    return "Not configured (set OPENAI_API_KEY)"


def _fail(error: Exception):
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(code=1)


@app.command()
def generate(
    schema: str = typer.Option(..., "--schema", "-s", help="Path to the schema file (JSON or SQL)"),
    output: str = typer.Option(
        "output.csv", "--output", "-o",
        help="Output directory for multi-table schemas or file path for single-table schemas",
    ),
    rows: Optional[int] = typer.Option(None, "--rows", "-n", help="Number of rows to generate per table"),
    format: Optional[str] = typer.Option(
        None, "--format", "-f",
        help="Override output format (csv or json). Default: json for JSON schemas, csv for SQL",
    ),
    ai: bool = typer.Option(False, "--ai", help="Enable OpenAI-powered inference for ambiguous fields"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    parallel: bool = typer.Option(False, "--parallel", help="Generate independent tables concurrently"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Worker pool size (default: CPU count)"),
    batch_size: Optional[int] = typer.Option(None, "--batch-size", help="Rows generated per batch"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducibility"),
    config_file: Optional[str] = typer.Option(None, "--config", help="YAML configuration file"),
):
    """Generate fake data from a schema file."""
    try:
        config = load_config(config_file) if config_file else GenerationConfig()
        config = GenerationConfig.from_env(config).merge(
            num_rows=rows,
            output_format=format,
            use_ai=ai or None,
            verbose=verbose or None,
            parallel=parallel or None,
            workers=workers,
            batch_size=batch_size,
            seed=seed,
        ).validate()
        setup_logging(config.verbose)

        if config.use_ai:
            console.print(f"[blue]AI-enhanced mode enabled (OpenAI API: {_ai_status()})[/blue]")

        parsed = parse_schema(schema)
        engine = ForgeEngine(config)
        files = engine.generate_files(parsed, config.num_rows, output)
    except ForgeError as e:
        _fail(e)

    if len(files) == 1:
        console.print(f"[green]Fake data generated and written to: {files[0]}[/green]")
    else:
        console.print(f"[green]Fake data generated and written to {len(files)} files:[/green]")
        for path in files:
            console.print(f"  - {path}")


@app.command()
def infer(
    schema: str = typer.Option(..., "--schema", "-s", help="Path to the schema file (JSON or SQL)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Show the semantic type inferred for every field."""
    setup_logging(verbose)
    try:
        parsed = parse_schema(schema)
    except ForgeError as e:
        _fail(e)

    inference = FieldTypeInference()
    tables = parsed.tables or []
    if not tables:
        tables = [SchemaTable("data", parsed.fields)]

    table = Table(title=f"Field Type Inference: {schema}")
    table.add_column("Table", style="cyan")
    table.add_column("Field", style="cyan")
    table.add_column("Declared", style="yellow")
    table.add_column("Inferred", style="magenta")
    table.add_column("Rule", style="green")

    for t in tables:
        for f in t.fields:
            if f.reference is not None:
                tag, stage = f"-> {f.reference.key}", "reference"
            else:
                tag, stage = inference.infer_with_stage(f, t.name)
            table.add_row(t.name, f.name, f.type, tag, stage)

    console.print(table)


@app.command()
def describe(
    schema: str = typer.Option(..., "--schema", "-s", help="Path to the schema file (JSON or SQL)"),
    suggest: bool = typer.Option(False, "--suggest", help="Also suggest commonly related fields"),
):
    """Describe each table with the OpenAI API (requires OPENAI_API_KEY)."""
    setup_logging(False)
    classifier = OpenAIClassifier()
    if not classifier.is_available():
        _fail(ClassifierError("OpenAI API not configured (set OPENAI_API_KEY)"))

    try:
        parsed = parse_schema(schema)
        tables = [(t.name, [f.name for f in t.fields]) for t in parsed.tables]
        if not tables:
            tables = [("data", [f.name for f in parsed.fields])]

        for name, field_names in tables:
            console.print(f"[bold cyan]{name}[/bold cyan]")
            console.print(classifier.describe_table(name, field_names))
            if suggest:
                for suggestion in classifier.suggest_fields(name, field_names):
                    console.print(f"  + {suggestion}")
    except ForgeError as e:
        _fail(e)


@app.command()
def types():
    """List the supported semantic field types."""
    console.print(SUPPORTED_TYPES)


@app.command()
def version():
    """Show version information."""
    console.print(f"fakeforge v{__version__} - AI-Enhanced Fake Data Generator")
    console.print("Features:")
    console.print("  - Intelligent field type detection")
    console.print("  - 45+ supported data types")
    console.print("  - Relationship constraints")
    console.print("  - Directory-based output")
    console.print(f"  - OpenAI integration ({_ai_status()})")


def main():
    app()


if __name__ == "__main__":
    main()
