"""
Seed and Mock Data CLI Commands

This module contains the command implementations behind scout_seed.cli, keeping
the option parsing in cli.py and the behaviour here.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console

from scout_seed.cli_utils.console_styles import ConsoleStyles, key_value_table, print_json_or_tables
from scout_seed.python_libs.common.exceptions import SeedDataError
from scout_seed.python_libs.common.reference_data import ReferenceDataRepository
from scout_seed.python_libs.common.seed_data_config import MockTransactionConfig, SeedDataConfiguration
from scout_seed.python_libs.common.seed_data_logger import SeedDataLogger

console = Console()
console_styles = ConsoleStyles()


def _seed_logger(verbose: bool, log_file: Optional[str]) -> SeedDataLogger:
    return SeedDataLogger(
        log_level=logging.DEBUG if verbose else logging.INFO,
        log_file_path=log_file,
    )


def _fail(message: str) -> None:
    console_styles.print_error(console, f"❌ {message}")
    raise typer.Exit(code=1)


def run_mock(
    count: Optional[int] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    output: Optional[str] = None,
    seed: Optional[int] = None,
    config_path: Optional[str] = None,
    verbose: bool = False,
    log_file: Optional[str] = None,
):
    """Generate the mock transaction document and write it to disk."""
    from scout_seed.python_libs.python.mock_transactions import (
        MockTransactionAssembler,
        write_mock_document,
    )

    seed_logger = _seed_logger(verbose, log_file)
    try:
        base = MockTransactionConfig.from_file(config_path) if config_path else MockTransactionConfig()
        config = base.with_overrides(count=count, start=start, end=end, output=output, seed=seed)
        document = MockTransactionAssembler(config).generate()
        path = write_mock_document(document, config.output)
    except SeedDataError as e:
        _fail(f"Error generating mock data: {e}")
    except OSError as e:
        _fail(f"Error writing mock data: {e}")

    seed_logger.log_mock_summary(document["summary"], str(path))
    summary = document["summary"]
    console_styles.print_success(console, "🎉 Mock data generation completed!")
    details = [
        console_styles.format_label_value("Output", path),
        console_styles.format_label_value("Transactions", f"{summary['total_transactions']:,}"),
        console_styles.format_label_value(
            "Date range", f"{summary['date_range']['start']} to {summary['date_range']['end']}"
        ),
    ]
    console_styles.print_panel(console, "\n".join(details), title="Mock transactions")


def run_seed(
    config_path: Optional[str] = None,
    overrides: Optional[str] = None,
    store_type: str = "supabase",
    supabase_url: Optional[str] = None,
    supabase_key: Optional[str] = None,
    seed: Optional[int] = None,
    verbose: bool = False,
    log_file: Optional[str] = None,
):
    """Generate the seed dataset and persist it into the record store."""
    from scout_seed.python_libs.python.record_stores import RecordStoreFactory
    from scout_seed.python_libs.python.seed_pipeline import SeedPipeline

    override_dict: Dict[str, Any] = {}
    if overrides:
        try:
            override_dict = json.loads(overrides)
        except json.JSONDecodeError as e:
            _fail(f"Error parsing overrides JSON: {e}")
        if not isinstance(override_dict, dict):
            _fail("Overrides must be a JSON object")
    if seed is not None:
        override_dict["seed"] = seed

    seed_logger = _seed_logger(verbose, log_file)
    try:
        config = SeedDataConfiguration.from_file(config_path) if config_path else SeedDataConfiguration()
        if override_dict:
            config = config.apply_runtime_overrides(override_dict)
        store = RecordStoreFactory.create_store(
            store_type,
            url=supabase_url,
            service_key=supabase_key,
            refresh_procedure=config.refresh_procedure,
        )
        console_styles.print_info(console, f"🌱 Seeding {store_type} store...")
        summary = SeedPipeline(store, config, seed_logger).run()
    except SeedDataError as e:
        _fail(f"Error generating seed data: {e}")

    console.print(key_value_table(summary.row_counts(), key_header="Table", value_header="Rows"))
    if summary.refresh_succeeded is False:
        console_styles.print_warning(console, f"⚠️ Views were not refreshed: {summary.refresh_error}")
    console_styles.print_success(console, f"✅ Seeded {summary.total_rows:,} rows into {summary.total_tables} tables")


def run_analyze(
    input_path: str,
    panel: str = "trends",
    start: Optional[str] = None,
    end: Optional[str] = None,
    region: str = "all",
    store_type: str = "all",
    category: str = "all",
    brand: str = "all",
    output: Optional[str] = None,
):
    """Aggregate a mock document into a dashboard panel payload."""
    from scout_seed.python_libs.python.panel_analytics import PanelFilters, compute_panel

    try:
        with open(input_path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except OSError as e:
        _fail(f"Error reading {input_path}: {e}")
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON in {input_path}: {e}")

    filters = PanelFilters(
        start=start, end=end, region=region, store_type=store_type, category=category, brand=brand
    )
    try:
        result = compute_panel(panel, document, filters)
    except (ValueError, KeyError) as e:
        _fail(f"Error computing {panel} panel: {e}")

    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(result, f, indent=2)
        console_styles.print_success(console, f"✅ {panel} panel written to {path}")
    else:
        console.print_json(json.dumps(result))


def list_tables(config_path: Optional[str] = None, output_format: str = "table"):
    """List the seed stages with their configured volumes, and the mock catalogs."""
    try:
        config = SeedDataConfiguration.from_file(config_path) if config_path else SeedDataConfiguration()
    except SeedDataError as e:
        _fail(f"Error loading configuration: {e}")

    if output_format not in ("table", "json"):
        _fail(f"Invalid format '{output_format}'. Must be one of: table, json")

    items = {"seed_tables": config.stage_counts(), **ReferenceDataRepository.list_catalogs()}
    print_json_or_tables(console, items, output_format)
