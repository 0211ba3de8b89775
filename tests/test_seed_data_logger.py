import logging

from scout_seed.python_libs.common.seed_data_logger import (
    DateColumnInfo,
    SeedDataLogger,
    SeedRunSummary,
    StageMetrics,
)


class TestDateColumnAnalysis:
    """Test date column characterization of generated records."""

    def test_min_max_and_nulls(self, quiet_logger):
        records = [
            {"fulfilled_at": "2024-01-03T10:00:00.000Z"},
            {"fulfilled_at": None},
            {"fulfilled_at": "2024-02-10T08:30:00.000Z"},
        ]
        info = quiet_logger.analyze_records_date_columns(records, "customer_requests", ["fulfilled_at"])[0]
        assert info.min_date == "2024-01-03"
        assert info.max_date == "2024-02-10"
        assert info.null_count == 1
        assert info.total_count == 3
        assert round(info.completeness_percentage, 1) == 66.7

    def test_missing_column_and_empty_records(self, quiet_logger):
        assert quiet_logger.analyze_records_date_columns([{"a": 1}], "t", ["timestamp"]) == []
        assert quiet_logger.analyze_records_date_columns([], "t", ["timestamp"]) == []

    def test_completeness_of_empty_column(self):
        assert DateColumnInfo(column_name="x").completeness_percentage == 0.0


class TestRunSummary:
    def test_totals(self):
        summary = SeedRunSummary(
            started_at="2024-01-01T00:00:00Z",
            stage_metrics=[
                StageMetrics(stage_name="brands", table_name="brands", rows_persisted=5),
                StageMetrics(stage_name="products", table_name="products", rows_persisted=7, skipped=1),
            ],
        )
        assert summary.total_rows == 12
        assert summary.total_tables == 2
        assert summary.get_stage("products").skipped == 1
        assert summary.get_stage("missing") is None
        assert summary.to_dict()["stages"][0]["table_name"] == "brands"

    def test_rows_per_second(self):
        assert StageMetrics("s", "t", rows_persisted=100, duration_seconds=2.0).rows_per_second == 50.0
        assert StageMetrics("s", "t").rows_per_second == 0.0


class TestLoggerOutput:
    def test_refresh_failure_logged_as_warning(self, caplog):
        seed_logger = SeedDataLogger(logger_name="scout_seed.tests.refresh", enable_console_output=False)
        with caplog.at_level(logging.INFO, logger="scout_seed.tests.refresh"):
            seed_logger.log_refresh_result("refresh_analytical_views", error="boom")
        assert caplog.records[-1].levelno == logging.WARNING
        assert "boom" in caplog.records[-1].getMessage()

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "seed.log"
        seed_logger = SeedDataLogger(
            logger_name="scout_seed.tests.file", enable_console_output=False, log_file_path=str(log_file)
        )
        seed_logger.log_stage_start("brands", "brands", 50)
        for handler in seed_logger.logger.handlers:
            handler.flush()
        assert "Generating 50 rows for brands" in log_file.read_text(encoding="utf-8")
        for handler in seed_logger.logger.handlers:
            handler.close()
