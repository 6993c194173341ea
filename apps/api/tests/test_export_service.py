"""Tests for report CSV/JSON exports."""

import csv
import io
import json
from datetime import datetime, timezone

import pytest

from nadmo.enums import DisasterType, ReportStatus, Role
from nadmo.services.export_service import (
    ExportError,
    export_filename,
    export_reports,
    format_value,
    resolve_fields,
)

NOW = datetime(2025, 3, 5, 12, 0, tzinfo=timezone.utc)


def _parse_csv(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


# =============================================================================
# Field selection
# =============================================================================

def test_default_fields_exclude_optional_columns():
    keys = [field.key for field in resolve_fields(None)]

    assert keys[:3] == ["id", "status", "created_at"]
    assert "gps_coordinates" not in keys
    assert "number_injured" not in keys


def test_empty_selection_rejected():
    with pytest.raises(ExportError, match="at least one field"):
        resolve_fields([])


def test_unknown_field_rejected():
    with pytest.raises(ExportError, match="password"):
        resolve_fields(["id", "password"])


# =============================================================================
# Formatting
# =============================================================================

def test_format_value_labels():
    assert format_value(ReportStatus.IN_PROGRESS, "enum") == "In progress"
    assert format_value(DisasterType.ACCIDENT, "enum") == "Accident"
    assert format_value(None, "user") == "Anonymous"
    assert format_value(None) == ""
    assert format_value(True, "bool") == "Yes"
    assert format_value(NOW, "datetime") == "05 Mar 2025 12:00"


def test_long_description_truncated():
    text = "x" * 150

    assert format_value(text, "description") == "x" * 100 + "..."


def test_whitespace_collapsed():
    assert format_value("line one\n  line two") == "line one line two"


# =============================================================================
# Export
# =============================================================================

def test_csv_export_has_header_and_rows(make_actor, make_report):
    report = make_report(id="RPT-0100", status=ReportStatus.IN_PROGRESS, reporter=None)

    rows = _parse_csv(export_reports(make_actor(Role.ADMIN), [report]))

    assert rows[0][:4] == ["Report ID", "Status", "Created Date", "Disaster Type"]
    assert rows[1][0] == "RPT-0100"
    assert rows[1][1] == "In progress"
    assert rows[1][rows[0].index("Reporter")] == "Anonymous"


def test_csv_cells_guarded_against_formula_injection(make_actor, make_report):
    report = make_report(location_description='=HYPERLINK("http://evil")')

    rows = _parse_csv(export_reports(make_actor(Role.ADMIN), [report], ["location_description"]))

    assert rows[1] == ['\'=HYPERLINK("http://evil")']


def test_export_only_includes_visible_reports(make_actor, make_report):
    officer = make_actor(Role.DISTRICT_OFFICER)
    mine = make_report(id="RPT-0001", district="D1")
    other = make_report(id="RPT-0002", district="D2")

    rows = _parse_csv(export_reports(officer, [mine, other], ["id"]))

    assert rows == [["Report ID"], ["RPT-0001"]]


def test_nothing_visible_raises(make_actor, make_report):
    reporter = make_actor(Role.REPORTER)

    with pytest.raises(ExportError, match="No data to export"):
        export_reports(reporter, [make_report(reporter={"id": "someone-else"})])


def test_json_export_uses_labels(make_actor, make_report):
    report = make_report(id="RPT-0007", status=ReportStatus.FAKE)

    data = json.loads(export_reports(make_actor(), [report], ["id", "status"], "json"))

    assert data == [{"Report ID": "RPT-0007", "Status": "Fake"}]


def test_row_cap_truncates(make_actor, make_report):
    reports = [make_report() for _ in range(5)]

    rows = _parse_csv(export_reports(make_actor(), reports, ["id"], max_rows=2))

    assert len(rows) == 3


def test_unsupported_format_rejected(make_actor, make_report):
    with pytest.raises(ValueError):
        export_reports(make_actor(), [make_report()], fmt="pdf")


def test_export_filename():
    assert export_filename("reports", "csv", NOW) == "reports_2025-03-05.csv"
