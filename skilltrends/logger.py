"""
Structured logging system for SkillTrends.

Provides centralized logging with console and file outputs plus
counters for monitoring the aggregator (ingest, eviction, sync health).
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for the job store and the sync dispatcher.
    """

    def __init__(
        self,
        name: str = "skilltrends",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        self.metrics = {
            "jobs_added": 0,
            "duplicates_skipped": 0,
            "records_rejected": 0,
            "jobs_evicted": 0,
            "syncs_attempted": 0,
            "syncs_successful": 0,
            "syncs_failed": 0,
            "errors_by_type": {},
            "site_success_rate": {},
        }

        if enable_console:
            # stderr keeps stdout free for the serve command's replies
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"skilltrends_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_job_added(self):
        self.metrics["jobs_added"] += 1

    def record_duplicate(self):
        self.metrics["duplicates_skipped"] += 1

    def record_rejected(self):
        self.metrics["records_rejected"] += 1

    def record_evicted(self, count: int):
        """Add evicted records (cap overflow or age sweep)."""
        self.metrics["jobs_evicted"] += count

    def record_sync_attempt(self):
        self.metrics["syncs_attempted"] += 1

    def record_sync_success(self):
        self.metrics["syncs_successful"] += 1

    def record_sync_failure(self, error_type: str):
        self.metrics["syncs_failed"] += 1
        self.record_error(error_type)

    def record_error(self, error_type: str):
        """Count an error by type."""
        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def record_scrape_attempt(self, site: str):
        """Record a page scrape attempt for a site."""
        if site not in self.metrics["site_success_rate"]:
            self.metrics["site_success_rate"][site] = {
                "attempts": 0,
                "successes": 0
            }
        self.metrics["site_success_rate"][site]["attempts"] += 1

    def record_scrape_success(self, site: str):
        if site in self.metrics["site_success_rate"]:
            self.metrics["site_success_rate"][site]["successes"] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = self.metrics.copy()
        for site, stats in metrics_copy["site_success_rate"].items():
            if stats["attempts"] > 0:
                stats["success_rate"] = round(
                    stats["successes"] / stats["attempts"], 3
                )

        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        attempts = metrics["syncs_attempted"]
        successes = metrics["syncs_successful"]
        sync_rate = 0
        if attempts > 0:
            sync_rate = round(successes / attempts * 100, 1)

        self.info("=== Aggregator Session Metrics ===")
        self.info(
            f"Jobs: {metrics['jobs_added']} added, "
            f"{metrics['duplicates_skipped']} duplicates, "
            f"{metrics['records_rejected']} rejected, "
            f"{metrics['jobs_evicted']} evicted"
        )
        self.info(f"Syncs: {successes}/{attempts} ({sync_rate}% success)")

        if metrics["site_success_rate"]:
            self.info("Site Scrape Rates:")
            for site, stats in metrics["site_success_rate"].items():
                rate = stats.get("success_rate", 0) * 100
                self.info(f"  {site}: {stats['successes']}/{stats['attempts']} ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "skilltrends",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
