"""
Integration tests for the record pipeline.

Exercises ingestion, validation, review edits, duplicate handling, the export
gate and bank grouping together.
"""

from datetime import date

import pytest

from bankbatch.batch.pipeline import RecordPipeline
from bankbatch.core.errors import ExportGateError, IngestionError, RecordNotFoundError
from bankbatch.core.models import PipelineSettings

TODAY = date(2025, 1, 15)


@pytest.fixture
def pipeline(bank_registry, rule_engine):
    return RecordPipeline(registry=bank_registry, rule_engine=rule_engine)


@pytest.fixture
def loaded(pipeline, clean_sheet):
    pipeline.load([clean_sheet], today=TODAY)
    return pipeline


def duplicate_sheet(header):
    """Same payer account, amount and beneficiary account; names reordered."""
    return [
        header,
        ["1", "", "Electricity Co", "IQ98TRIQ979000012345", "500000", "",
         "TRIQIQBA979", "Ahmed Ali", "IQ55TRIQ979000011111", "February salary"],
        ["2", "", "Electricity Co", "IQ98TRIQ979000012345", "180000", "",
         "TRIQIQBA976", "Omar Khalid", "IQ71TRIQ976000022222", "February salary"],
        ["3", "", "Other Payer", "IQ98TRIQ979000012345", "500000", "",
         "TRIQIQBA979", "ALI AHMED", "IQ55TRIQ979000011111", "February salary"],
    ]


@pytest.mark.integration
class TestLoading:
    """Tests for RecordPipeline.load"""

    def test_clean_sheet(self, loaded):
        assert len(loaded) == 3
        assert loaded.summary() == {"total_records": 3, "invalid_records": 0, "duplicate_records": 0}
        assert all(record.value_date == "20250115" for record in loaded.records)

    def test_ids_unique_across_sources(self, pipeline, clean_sheet):
        pipeline.load([clean_sheet, clean_sheet], today=TODAY)

        ids = [record.id for record in pipeline.records]
        assert len(ids) == len(set(ids)) == 6

    def test_same_sheet_twice_is_flagged(self, pipeline, clean_sheet):
        pipeline.load([clean_sheet, clean_sheet], today=TODAY)

        assert pipeline.duplicate_count() == 6
        assert pipeline.duplicate_details() == [
            "Duplicate entry found in rows: 1, 4",
            "Duplicate entry found in rows: 2, 5",
            "Duplicate entry found in rows: 3, 6",
        ]

    def test_invalid_rows_reported(self, pipeline, sheet_header):
        rows = [
            sheet_header,
            ["1", "", "Electricity Co", "IQ98", "100", "",
             "TRIQIQBA979", "Sara Hassan", "IQ55RAFB000000011111", ""],
            ["2", "", "Electricity Co", "IQ98", "100", "",
             "TRIQ", "A" * 40, "IQ55TRIQ979000011111", ""],
        ]

        pipeline.load([rows], today=TODAY)

        assert pipeline.validation_error_details() == [
            'Row 1: BIC code "TRIQ979" not found in beneficiary account',
            "Row 2: Receiver BIC must be at least 8 characters; Beneficiary name exceeds 32 characters",
        ]

    def test_no_sources(self, pipeline):
        with pytest.raises(IngestionError):
            pipeline.load([])

    def test_set_records_rejects_duplicate_ids(self, pipeline, make_record):
        record = make_record()

        with pytest.raises(ValueError, match="unique"):
            pipeline.set_records([record, record])

    def test_set_records_revalidates(self, pipeline, make_record):
        pipeline.set_records([make_record(beneficiary_account="IQ00NONE")])

        assert pipeline.error_count() == 1


@pytest.mark.integration
class TestReviewEdits:
    """Tests for field edits and bulk edits"""

    def test_edit_revalidates_other_fields(self, loaded):
        record_id = loaded.records[1].id

        broken = loaded.update_field(record_id, "receiver_bic", "TRIQIQBA976")
        assert broken.validation_error == 'BIC code "TRIQ976" not found in beneficiary account'

        fixed = loaded.update_field(record_id, "beneficiary_account", "IQ55TRIQ976000011111")
        assert fixed.validation_error is None
        assert loaded.get(record_id) == fixed

    def test_edited_name_is_normalized(self, loaded):
        record_id = loaded.records[0].id

        updated = loaded.update_field(record_id, "beneficiary_name", " Ahmed\tAli ")

        assert updated.beneficiary_name == "AhmedAli"

    def test_edit_pipeline_owned_field(self, loaded):
        with pytest.raises(ValueError, match="cannot be edited"):
            loaded.update_field(loaded.records[0].id, "currency", "USD")

    def test_edit_unknown_record(self, loaded):
        with pytest.raises(RecordNotFoundError) as exc_info:
            loaded.update_field("missing", "amount", "1")
        assert exc_info.value.record_id == "missing"

    def test_apply_global_payer_account(self, loaded):
        assert loaded.apply_global_payer_account("IQ11RAFB001000099999") == 3
        assert {r.payer_account for r in loaded.records} == {"IQ11RAFB001000099999"}

    def test_blank_global_payer_account_ignored(self, loaded):
        assert loaded.apply_global_payer_account("   ") == 0
        assert {r.payer_account for r in loaded.records} == {"IQ98TRIQ979000012345"}

    def test_trim_all_names(self, pipeline, make_record):
        long_name = "Abdulrahman Mohammed Abdulkareem Al-Hashimi"
        pipeline.set_records([make_record(beneficiary_name=long_name), make_record()])
        assert pipeline.error_count() == 1

        assert pipeline.trim_all_names() == 1

        assert pipeline.records[0].beneficiary_name == long_name[:32]
        assert pipeline.records[1].beneficiary_name == "Sara Hassan"
        assert pipeline.error_count() == 0

    def test_trim_uses_settings_ceiling(self, bank_registry, make_record):
        pipeline = RecordPipeline(bank_registry, settings=PipelineSettings(max_name_length=4))
        pipeline.set_records([make_record(beneficiary_name="Sara Hassan")])

        pipeline.trim_all_names()

        assert pipeline.records[0].beneficiary_name == "Sara"

    def test_search(self, loaded):
        assert [r.beneficiary_name for r in loaded.search("omar")] == ["Omar Khalid"]
        assert len(loaded.search("RAFB")) == 1
        assert len(loaded.search("")) == 3
        assert loaded.search("nobody") == []

    def test_search_ignores_flag_values(self, loaded):
        assert loaded.search("false") == []
        assert loaded.search("true") == []


@pytest.mark.integration
class TestDuplicatesAndExport:
    """Tests for duplicate handling, the export gate and grouping"""

    def test_reordered_names_flagged_and_removed(self, pipeline, sheet_header):
        pipeline.load([duplicate_sheet(sheet_header)], today=TODAY)

        assert [r.is_duplicate for r in pipeline.records] == [True, False, True]
        assert pipeline.duplicate_details() == [
            "Duplicate entry found in rows: 1",
            "Duplicate entry found in rows: 3",
        ]

        assert pipeline.remove_duplicates() == 2
        assert [r.beneficiary_name for r in pipeline.records] == ["Omar Khalid"]

    def test_gate_blocks_duplicates(self, pipeline, sheet_header):
        pipeline.load([duplicate_sheet(sheet_header)], today=TODAY)

        with pytest.raises(ExportGateError) as exc_info:
            pipeline.group_for_export()
        assert exc_info.value.reasons == ["2 record(s) are duplicates"]

    def test_gate_blocks_validation_errors(self, loaded):
        loaded.update_field(loaded.records[0].id, "receiver_bic", "RAF")

        with pytest.raises(ExportGateError, match="1 record\\(s\\) have validation errors"):
            loaded.export_tables(when=TODAY)

    def test_gate_ignores_stale_flags(self, loaded):
        first, second = loaded.records[1], loaded.records[2]
        loaded.update_field(second.id, "amount", first.amount)
        loaded.update_field(second.id, "receiver_bic", first.receiver_bic)
        loaded.update_field(second.id, "beneficiary_account", first.beneficiary_account)
        assert loaded.duplicate_count() == 0

        with pytest.raises(ExportGateError, match="duplicates"):
            loaded.group_for_export()

        assert loaded.check_duplicates() == 2

    def test_group_for_export(self, loaded):
        groups = loaded.group_for_export()

        assert list(groups) == ["Rafidain Bank", "Trade Bank of Iraq"]
        assert [r.beneficiary_name for r in groups["Trade Bank of Iraq"]] == ["Sara Hassan", "Omar Khalid"]

    def test_unregistered_bic_grouped_as_unknown(self, loaded):
        loaded.update_field(loaded.records[0].id, "receiver_bic", "ZZZZIQBA")
        loaded.update_field(loaded.records[0].id, "beneficiary_account", "IQ00ZZZZQBA00001")

        groups = loaded.group_for_export()

        assert "Unknown Bank" in groups

    def test_export_tables(self, bank_registry, rule_engine, clean_sheet):
        pipeline = RecordPipeline(bank_registry, rule_engine, PipelineSettings(export_title="Payroll"))
        pipeline.load([clean_sheet], today=TODAY)

        tables = pipeline.export_tables(when=TODAY)

        assert [t.filename for t in tables] == [
            "Payroll Rafidain Bank كانون الثاني 2025.csv",
            "Payroll Trade Bank of Iraq كانون الثاني 2025.csv",
        ]
        assert [t.record_count for t in tables] == [1, 2]
        assert tables[0].rows[0][1] == "20250115"

    def test_grouped_records_carry_fresh_flags(self, pipeline, make_record):
        pipeline.set_records([
            make_record(beneficiary_name="Ahmed Ali"),
            make_record(beneficiary_name="Ali Ahmed"),
        ])
        assert pipeline.check_duplicates() == 2

        pipeline.update_field(pipeline.records[1].id, "amount", "999")
        groups = pipeline.group_for_export()

        grouped = [record for records in groups.values() for record in records]
        assert len(grouped) == 2
        assert not any(record.is_duplicate for record in grouped)
        assert pipeline.duplicate_count() == 0


@pytest.mark.integration
class TestReorderedNameScenario:
    """Two transfers differing only in beneficiary name word order and case"""

    @pytest.fixture
    def pair_sheet(self, sheet_header):
        return [
            sheet_header,
            ["1", "", "Electricity Co", "IQ98TRIQ979000012345", "500000", "",
             "TRIQIQBA979", "Ahmed Ali", "IQ55TRIQ979000011111", "February salary"],
            ["2", "", "Electricity Co", "IQ98TRIQ979000012345", "500000", "",
             "TRIQIQBA979", "ALI AHMED", "IQ55TRIQ979000011111", "February salary"],
        ]

    def test_both_flagged_then_removed(self, pipeline, pair_sheet):
        pipeline.load([pair_sheet], today=TODAY)

        assert [r.is_duplicate for r in pipeline.records] == [True, True]
        assert pipeline.summary() == {"total_records": 2, "invalid_records": 0, "duplicate_records": 2}

        assert pipeline.remove_duplicates() == 2
        assert len(pipeline) == 0
        assert pipeline.records == ()

    def test_empty_set_exports_nothing(self, pipeline, pair_sheet):
        pipeline.load([pair_sheet], today=TODAY)
        pipeline.remove_duplicates()

        assert pipeline.group_for_export() == {}
        assert pipeline.export_tables(when=TODAY) == []
