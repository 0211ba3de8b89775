from __future__ import annotations

from typing import Optional

import lazy_import
import typer
from typing_extensions import Annotated

seed_data_commands = lazy_import.lazy_module("scout_seed.cli_utils.seed_data_commands")

app = typer.Typer(
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
    help="Generate synthetic Philippine retail data for the Scout analytics dashboard.",
)


@app.command()
def mock(
    count: Annotated[
        Optional[int],
        typer.Option("--count", "-n", help="Number of transactions to generate (default 5000)"),
    ] = None,
    start: Annotated[
        Optional[str],
        typer.Option("--start", help="Start date, ISO format (default 2024-01-01)"),
    ] = None,
    end: Annotated[
        Optional[str],
        typer.Option("--end", help="End date, ISO format (default 2024-12-20)"),
    ] = None,
    output: Annotated[
        Optional[str],
        typer.Option("--output", "-o", help="Output JSON file (default data/mockTransactions.json)"),
    ] = None,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", "-s", help="Random seed for reproducible output"),
    ] = None,
    config: Annotated[
        Optional[str],
        typer.Option("--config", "-c", help="YAML or JSON file with mock generator parameters"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
    log_file: Annotated[Optional[str], typer.Option("--log-file", help="Also write logs to this file")] = None,
):
    """
    Generate a self-contained mock transaction JSON document.

    Examples:
      # 5000 transactions for 2024 into data/mockTransactions.json
      scout-seed mock

      # A small reproducible file
      scout-seed mock --count 100 --seed 42 --output data/sample.json
    """
    seed_data_commands.run_mock(
        count=count,
        start=start,
        end=end,
        output=output,
        seed=seed,
        config_path=config,
        verbose=verbose,
        log_file=log_file,
    )


@app.command()
def seed(
    config: Annotated[
        Optional[str],
        typer.Option("--config", "-c", help="YAML or JSON file with seed-loader parameters"),
    ] = None,
    overrides: Annotated[
        Optional[str],
        typer.Option(
            "--overrides",
            "-p",
            help='JSON object of configuration overrides (e.g. \'{"transaction_count": 500}\')',
        ),
    ] = None,
    store: Annotated[
        str,
        typer.Option("--store", help="Record store: 'supabase' or 'memory' (dry run)"),
    ] = "supabase",
    supabase_url: Annotated[
        Optional[str],
        typer.Option("--supabase-url", envvar="SUPABASE_URL", help="Supabase project URL"),
    ] = None,
    supabase_key: Annotated[
        Optional[str],
        typer.Option("--supabase-key", envvar="SUPABASE_SERVICE_KEY", help="Supabase service role key"),
    ] = None,
    seed_value: Annotated[
        Optional[int],
        typer.Option("--seed", "-s", help="Random seed for reproducible output"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
    log_file: Annotated[Optional[str], typer.Option("--log-file", help="Also write logs to this file")] = None,
):
    """
    Generate the seed dataset and bulk-insert it table by table.

    Examples:
      # Seed Supabase using SUPABASE_URL and SUPABASE_SERVICE_KEY
      scout-seed seed

      # Dry run against the in-memory store with a smaller volume
      scout-seed seed --store memory --overrides '{"transaction_count": 500}'
    """
    seed_data_commands.run_seed(
        config_path=config,
        overrides=overrides,
        store_type=store,
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        seed=seed_value,
        verbose=verbose,
        log_file=log_file,
    )


@app.command()
def analyze(
    input_path: Annotated[str, typer.Argument(help="Mock transaction JSON document")],
    panel: Annotated[
        str,
        typer.Option("--panel", help="Panel to compute: 'trends', 'product-mix' or 'consumer-behavior'"),
    ] = "trends",
    start: Annotated[Optional[str], typer.Option("--start", help="Only include transactions from this date")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Only include transactions up to this date")] = None,
    region: Annotated[str, typer.Option("--region", help="Region code or 'all'")] = "all",
    store_type: Annotated[str, typer.Option("--store-type", help="Store type or 'all'")] = "all",
    category: Annotated[str, typer.Option("--category", help="Product category or 'all'")] = "all",
    brand: Annotated[str, typer.Option("--brand", help="Brand or 'all'")] = "all",
    output: Annotated[
        Optional[str],
        typer.Option("--output", "-o", help="Write the panel JSON here instead of printing it"),
    ] = None,
):
    """
    Aggregate a mock document into the JSON a dashboard panel consumes.

    Examples:
      scout-seed analyze data/mockTransactions.json --panel trends --region NCR
      scout-seed analyze data/mockTransactions.json --panel product-mix --category Beverages
      scout-seed analyze data/mockTransactions.json --panel consumer-behavior --store-type Grocery
    """
    seed_data_commands.run_analyze(
        input_path=input_path,
        panel=panel,
        start=start,
        end=end,
        region=region,
        store_type=store_type,
        category=category,
        brand=brand,
        output=output,
    )


@app.command()
def tables(
    config: Annotated[
        Optional[str],
        typer.Option("--config", "-c", help="YAML or JSON file with seed-loader parameters"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: 'table' or 'json'"),
    ] = "table",
):
    """List the seeded tables with their configured volumes and the mock catalogs."""
    seed_data_commands.list_tables(config_path=config, output_format=output_format)


if __name__ == "__main__":
    app()
