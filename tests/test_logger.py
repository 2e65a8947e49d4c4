"""
Tests for logger functionality.
"""

import pytest
from skilltrends.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["jobs_added"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_context_written_as_json(self, tmp_path):
        """Context kwargs should be appended to the line as JSON."""
        logger = StructuredLogger(name="test-context", log_dir=tmp_path, enable_console=False)

        logger.info("Synced trends", url="https://example.com", skills=5)

        content = next(tmp_path.glob("*.log")).read_text()
        assert 'Synced trends | Context: {"url": "https://example.com", "skills": 5}' in content

    def test_store_metrics(self):
        """Job store counters should accumulate."""
        logger = StructuredLogger(name="test", enable_file=False, enable_console=False)

        logger.record_job_added()
        logger.record_job_added()
        logger.record_duplicate()
        logger.record_rejected()
        logger.record_evicted(3)

        metrics = logger.get_metrics()
        assert metrics["jobs_added"] == 2
        assert metrics["duplicates_skipped"] == 1
        assert metrics["records_rejected"] == 1
        assert metrics["jobs_evicted"] == 3

    def test_sync_metrics(self):
        """Sync failures should be counted by error type."""
        logger = StructuredLogger(name="test", enable_file=False, enable_console=False)

        logger.record_sync_attempt()
        logger.record_sync_success()
        logger.record_sync_attempt()
        logger.record_sync_failure("HTTPError_500")

        metrics = logger.get_metrics()
        assert metrics["syncs_attempted"] == 2
        assert metrics["syncs_successful"] == 1
        assert metrics["syncs_failed"] == 1
        assert metrics["errors_by_type"] == {"HTTPError_500": 1}

    def test_site_success_rate(self):
        """Success rate should be calculated per site."""
        logger = StructuredLogger(name="test", enable_file=False, enable_console=False)

        for _ in range(3):
            logger.record_scrape_attempt("linkedin.com")
        logger.record_scrape_success("linkedin.com")
        logger.record_scrape_success("linkedin.com")

        rate = logger.get_metrics()["site_success_rate"]["linkedin.com"]["success_rate"]
        assert rate == pytest.approx(0.667, rel=0.01)

    def test_metrics_summary(self, tmp_path):
        """The summary should list site rates and error types."""
        logger = StructuredLogger(name="test-summary", log_dir=tmp_path, enable_console=False)
        logger.record_scrape_attempt("naukri.com")
        logger.record_error("Timeout")

        logger.log_metrics_summary()

        content = next(tmp_path.glob("*.log")).read_text()
        assert "Aggregator Session Metrics" in content
        assert "naukri.com: 0/1" in content
        assert "Timeout: 1" in content

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        logger.info("Test message")

        log_files = list(tmp_path.glob("*.log"))
        assert len(log_files) == 1
        assert log_files[0].name.startswith("skilltrends_")
        assert "Test message" in log_files[0].read_text()


class TestGlobalLogger:
    """Test global logger singleton."""

    @pytest.fixture(autouse=True)
    def restore_global(self):
        yield
        reset_logger()
        get_logger(enable_file=False, enable_console=False)

    def test_get_logger_singleton(self, tmp_path):
        """get_logger should return the same instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        """reset_logger should create a new instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_job_added()

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)
        assert logger2 is not logger1
        assert logger2.metrics["jobs_added"] == 0
