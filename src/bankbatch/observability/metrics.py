"""
Prometheus metrics collection for bankbatch

This module provides metrics instrumentation for monitoring
ingestion volume, data quality and export activity.
"""
from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# INGESTION METRICS
# =======================

records_ingested_total = Counter(
    name="bankbatch_records_ingested_total",
    documentation="Total number of records ingested from source rows",
    labelnames=["source"],
    registry=REGISTRY,
)

operation_duration_seconds = Histogram(
    name="bankbatch_operation_duration_seconds",
    documentation="Time spent in pipeline operations in seconds",
    labelnames=["operation"],  # load, detect_duplicates, export
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

validation_failures_total = Counter(
    name="bankbatch_validation_failures_total",
    documentation="Total number of rule failures across validation passes",
    labelnames=["rule_type"],
    registry=REGISTRY,
)

duplicates_flagged_total = Counter(
    name="bankbatch_duplicates_flagged_total",
    documentation="Total number of records flagged as duplicates",
    registry=REGISTRY,
)

duplicates_removed_total = Counter(
    name="bankbatch_duplicates_removed_total",
    documentation="Total number of duplicate records removed",
    registry=REGISTRY,
)

# =======================
# EXPORT METRICS
# =======================

export_records_total = Counter(
    name="bankbatch_export_records_total",
    documentation="Total number of records handed to export, per bank",
    labelnames=["bank"],
    registry=REGISTRY,
)

gate_rejections_total = Counter(
    name="bankbatch_gate_rejections_total",
    documentation="Export requests rejected because errors or duplicates remain",
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


# =======================
# CONTEXT MANAGERS
# =======================

class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(operation_duration_seconds, operation="load"):
            # do work
            pass
    """

    def __init__(self, histogram: Histogram, **labels):
        """
        Initialize duration tracker

        Args:
            histogram: Prometheus Histogram metric
            **labels: Label values for the metric
        """
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        """Start timer"""
        self.timer = self.histogram.labels(**self.labels).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Stop timer"""
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def record_validation_failure(rule_type: str) -> None:
    """
    Record a validation failure.

    Args:
        rule_type: Type of validation rule that failed
    """
    increment_counter(validation_failures_total, 1, rule_type=rule_type)
