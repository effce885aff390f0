"""Tests for EmployeeRecord coercion and detailsData flattening."""

import pytest

from occupancy.records import (
    DISPLAY_NAME_DEFAULT,
    UNKNOWN_COMPANY,
    EmployeeRecord,
    clean_text,
    iter_records,
)


class TestFromRaw:
    def test_camel_case_fields(self) -> None:
        rec = EmployeeRecord.from_raw(
            {
                "companyName": "Acme",
                "zone": "Red Zone",
                "name": "Zoe",
                "employeeId": 42,
                "cardNo": "C-9",
                "personnelType": "Contractor",
                "primaryLocation": "HQ",
            }
        )
        assert rec == EmployeeRecord(
            company="Acme",
            zone="Red Zone",
            display_name="Zoe",
            employee_id="42",
            card_number="C-9",
            personnel_type="Contractor",
            primary_location="HQ",
        )

    def test_defaults_when_absent(self) -> None:
        rec = EmployeeRecord.from_raw({})
        assert rec.company == UNKNOWN_COMPANY
        assert rec.zone is None
        assert rec.display_name is None
        assert rec.shown_name == DISPLAY_NAME_DEFAULT

    def test_display_name_first_non_empty(self) -> None:
        assert EmployeeRecord.from_raw({"name": "", "employeeName": "Alt"}).display_name == "Alt"
        assert EmployeeRecord.from_raw({"name": "Main", "employeeName": "Alt"}).display_name == "Main"

    def test_blank_company_defaults(self) -> None:
        assert EmployeeRecord.from_raw({"companyName": "   "}).company == UNKNOWN_COMPANY

    def test_frozen(self) -> None:
        rec = EmployeeRecord.from_raw({"companyName": "Acme"})
        with pytest.raises(Exception):
            rec.company = "Other"  # type: ignore[misc]

    def test_generic_type_key_ignored(self) -> None:
        assert EmployeeRecord.from_raw({"type": "badge", "personnelType": None}).personnel_type is None

    def test_keeps_source_mapping(self) -> None:
        raw = {"companyName": "Acme", "deskNo": "D-4"}
        rec = EmployeeRecord.from_raw(raw)
        assert rec.source is raw
        assert rec.source["deskNo"] == "D-4"
        assert rec == EmployeeRecord(company="Acme")


class TestCleanText:
    @pytest.mark.parametrize("value", [None, "", "  ", float("nan"), "nan", "<NA>"])
    def test_missing_values(self, value) -> None:
        assert clean_text(value) is None

    def test_strips(self) -> None:
        assert clean_text("  Acme ") == "Acme"

    def test_numbers(self) -> None:
        assert clean_text(7) == "7"
        assert clean_text(1.5) == "1.5"


class TestIterRecords:
    def test_flattens_in_group_order(self) -> None:
        data = {"a": [{"name": "1"}, {"name": "2"}], "b": [{"name": "3"}]}
        assert [r.display_name for r in iter_records(data)] == ["1", "2", "3"]

    def test_skips_non_list_groups(self) -> None:
        data = {"a": "oops", "b": None, "c": {"name": "x"}, "d": [{"name": "ok"}]}
        assert [r.display_name for r in iter_records(data)] == ["ok"]

    def test_skips_non_mapping_records(self) -> None:
        data = {"a": [None, "text", 3, {"name": "ok"}]}
        assert [r.display_name for r in iter_records(data)] == ["ok"]

    @pytest.mark.parametrize("data", [None, "text", 5])
    def test_bad_input_yields_nothing(self, data) -> None:
        assert list(iter_records(data)) == []

    def test_flat_list_accepted(self) -> None:
        assert len(list(iter_records([{"name": "a"}, {"name": "b"}]))) == 2
