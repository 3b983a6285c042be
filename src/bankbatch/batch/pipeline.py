"""
Record pipeline orchestration.

Coordinates the flow: ingest → validate → review edits → detect duplicates →
remove duplicates → gate → group by bank → export tables
"""

from collections.abc import Sequence
from datetime import date
from typing import Any

from bankbatch.batch.readers import merge_sources
from bankbatch.batch.writers import build_export_tables
from bankbatch.core.banks import group_by_bank
from bankbatch.core.dedupe import (
    detect_duplicates,
    duplicate_details,
    find_duplicate_positions,
    remove_duplicates,
)
from bankbatch.core.errors import ExportGateError, RecordNotFoundError
from bankbatch.core.models import (
    MUTABLE_FIELDS,
    BankRegistry,
    ExportTable,
    PipelineSettings,
    TransactionRecord,
)
from bankbatch.core.rules import RuleEngine
from bankbatch.core.text import normalize_name
from bankbatch.observability.logger import get_logger, log_operation
from bankbatch.observability.metrics import (
    duplicates_removed_total,
    gate_rejections_total,
    increment_counter,
    operation_duration_seconds,
    records_ingested_total,
    track_duration,
)

logger = get_logger(__name__)


class RecordPipeline:
    """
    Holds the record set of one review session and applies every workflow step.

    Each step replaces the record list with new record values; records are
    never patched in place. Every edit re-runs the full rule set on the edited
    record.

    Flow:
    1. load() merges source sheets, validates, flags duplicates
    2. update_field() / bulk edits during review
    3. check_duplicates() / remove_duplicates() on request
    4. group_for_export() / export_tables() behind the export gate
    """

    def __init__(
        self,
        registry: BankRegistry,
        rule_engine: RuleEngine | None = None,
        settings: PipelineSettings | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            registry: Bank registry used for grouping
            rule_engine: Validation rules (defaults to RuleEngine.default())
            settings: Pipeline constants
        """
        self.registry = registry
        self.rule_engine = rule_engine or RuleEngine.default()
        self.settings = settings or PipelineSettings()
        self._records: list[TransactionRecord] = []

    @property
    def records(self) -> tuple[TransactionRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    # =======================
    # INGESTION
    # =======================

    def load(
        self,
        sources: Sequence[Sequence[Sequence[Any]]],
        source_name: str = "upload",
        today: date | None = None,
    ) -> tuple[TransactionRecord, ...]:
        """
        Replace the session's records with freshly ingested ones.

        Args:
            sources: One raw row list per source sheet (header row first)
            source_name: Label for metrics
            today: Value date override

        Returns:
            The loaded records, validated and with duplicate flags set

        Raises:
            IngestionError: If no sources are given
        """
        with log_operation("Loading sources", logger=logger, source_count=len(sources)) as op, \
                track_duration(operation_duration_seconds, operation="load"):
            records = merge_sources(sources, self.settings, today=today)
            records = self.rule_engine.revalidate_all(records)
            self._records = detect_duplicates(records)
            op.annotate(record_count=len(self._records))

        increment_counter(records_ingested_total, len(self._records), source=source_name)
        logger.info(
            f"Loaded {len(self._records)} records from {len(sources)} source(s): "
            f"{self.error_count()} with validation errors, {self.duplicate_count()} duplicates"
        )
        return self.records

    def set_records(self, records: Sequence[TransactionRecord]) -> None:
        """
        Replace the session's records with already-built records.

        Records are revalidated; ids must be unique.

        Raises:
            ValueError: If two records share an id
        """
        ids = [record.id for record in records]
        if len(ids) != len(set(ids)):
            raise ValueError("Record ids must be unique within a record set")
        self._records = self.rule_engine.revalidate_all(records)

    # =======================
    # REVIEW EDITS
    # =======================

    def get(self, record_id: str) -> TransactionRecord:
        """
        Look up a record by id.

        Raises:
            RecordNotFoundError: If no record has this id
        """
        return self._records[self._position(record_id)]

    def _position(self, record_id: str) -> int:
        for position, record in enumerate(self._records):
            if record.id == record_id:
                return position
        raise RecordNotFoundError(record_id)

    def update_field(self, record_id: str, field: str, value: str) -> TransactionRecord:
        """
        Edit one field of one record and revalidate it.

        Args:
            record_id: Record to edit
            field: Field name, one of MUTABLE_FIELDS
            value: New value

        Returns:
            The updated record

        Raises:
            ValueError: If the field is not editable
            RecordNotFoundError: If no record has this id
        """
        if field not in MUTABLE_FIELDS:
            raise ValueError(f"Field '{field}' cannot be edited")

        position = self._position(record_id)
        updated = self.rule_engine.revalidate(self._records[position].with_updates(**{field: value}))
        self._records[position] = updated
        return updated

    def apply_global_payer_account(self, payer_account: str) -> int:
        """
        Set the same payer account on every record.

        A blank account is ignored.

        Returns:
            Number of records updated
        """
        if not payer_account or not payer_account.strip():
            return 0

        self._records = [
            self.rule_engine.revalidate(record.with_updates(payer_account=payer_account))
            for record in self._records
        ]
        logger.info(f"Applied payer account to {len(self._records)} records")
        return len(self._records)

    def trim_all_names(self, max_length: int | None = None) -> int:
        """
        Normalize every beneficiary name and cut it to the length ceiling.

        Args:
            max_length: Ceiling (defaults to settings.max_name_length)

        Returns:
            Number of names that were shortened
        """
        max_length = max_length or self.settings.max_name_length
        shortened = 0
        trimmed_records = []
        for record in self._records:
            name = normalize_name(record.beneficiary_name)
            if len(name) > max_length:
                shortened += 1
            trimmed = record.with_updates(beneficiary_name=name[:max_length])
            trimmed_records.append(self.rule_engine.revalidate(trimmed))

        self._records = trimmed_records
        logger.info(f"Trimmed {shortened} beneficiary names to {max_length} characters")
        return shortened

    # =======================
    # DUPLICATES
    # =======================

    def check_duplicates(self) -> int:
        """
        Recompute duplicate flags over the current record set.

        Returns:
            Number of records flagged
        """
        with track_duration(operation_duration_seconds, operation="detect_duplicates"):
            self._records = detect_duplicates(self._records)
        return self.duplicate_count()

    def remove_duplicates(self) -> int:
        """
        Drop every record currently flagged as a duplicate.

        Returns:
            Number of records removed
        """
        before = len(self._records)
        self._records = remove_duplicates(self._records)
        removed = before - len(self._records)
        if removed:
            increment_counter(duplicates_removed_total, removed)
            logger.info(f"Removed {removed} duplicate records, {len(self._records)} remain")
        return removed

    # =======================
    # REPORTS
    # =======================

    def error_count(self) -> int:
        return sum(1 for record in self._records if not record.is_valid)

    def duplicate_count(self) -> int:
        return sum(1 for record in self._records if record.is_duplicate)

    def validation_error_details(self) -> list[str]:
        """One "Row <n>: <error>" line per invalid record (1-based position)."""
        return [
            f"Row {position}: {record.validation_error}"
            for position, record in enumerate(self._records, start=1)
            if not record.is_valid
        ]

    def duplicate_details(self) -> list[str]:
        return duplicate_details(self._records)

    def summary(self) -> dict[str, int]:
        """
        Get counts for the current record set.

        Returns:
            Dictionary with total_records, invalid_records, duplicate_records
        """
        return {
            "total_records": len(self._records),
            "invalid_records": self.error_count(),
            "duplicate_records": self.duplicate_count(),
        }

    def search(self, query: str) -> list[TransactionRecord]:
        """
        Case-insensitive substring search over every text field of every record.

        An empty query returns all records.
        """
        needle = query.lower()
        return [
            record for record in self._records
            if any(
                needle in value.lower()
                for value in record.model_dump().values()
                if isinstance(value, str)
            )
        ]

    # =======================
    # EXPORT
    # =======================

    def check_export_gate(self) -> None:
        """
        Verify the record set may be exported.

        Duplicates are counted on a fresh detection pass; the stored flags
        are not consulted.

        Raises:
            ExportGateError: If validation errors or duplicates remain
        """
        reasons = []
        invalid = self.error_count()
        if invalid:
            reasons.append(f"{invalid} record(s) have validation errors")

        duplicates = len(find_duplicate_positions(self._records))
        if duplicates:
            reasons.append(f"{duplicates} record(s) are duplicates")

        if reasons:
            increment_counter(gate_rejections_total)
            logger.warning(f"Export rejected: {'; '.join(reasons)}")
            raise ExportGateError(reasons)

    def group_for_export(self) -> dict[str, list[TransactionRecord]]:
        """
        Group the clean record set by destination bank.

        Duplicate flags are refreshed once the gate passes, so no grouped
        record carries a stale flag.

        Raises:
            ExportGateError: If validation errors or duplicates remain
        """
        self.check_export_gate()
        self._records = detect_duplicates(self._records)
        groups = group_by_bank(self._records, self.registry)
        logger.info(f"Grouped {len(self._records)} records into {len(groups)} bank group(s)")
        return groups

    def export_tables(self, when: date | None = None, extension: str = "csv") -> list[ExportTable]:
        """
        Build one export table per bank group.

        Args:
            when: Export date used in file names (defaults to today)
            extension: File extension for the suggested file names

        Raises:
            ExportGateError: If validation errors or duplicates remain
        """
        with track_duration(operation_duration_seconds, operation="export"):
            groups = self.group_for_export()
            return build_export_tables(groups, when=when, settings=self.settings, extension=extension)
