"""Tests for the record extractor: header aliases, port handling, tolerance"""

import pytest

from depmap.extraction import extract
from depmap.extraction.columns import cell_text, first_matching_column, is_database_sheet, sheet_rank
from depmap.extraction.extractor import parse_dependency_row
from depmap.extraction.ports import parse_port, recover_port
from depmap.ir.errors import ExtractionError


def make_row(source, target, port=None, **extra) -> dict:
    row = {
        "Source Server ID": source,
        "Target Server ID": target,
        "Communication Port": port if port is not None else "",
    }
    row.update(extra)
    return row


def test_english_export_columns():
    row = make_row(
        "web-01",
        "db-01",
        5432,
        **{
            "Protocol": "tcp",
            "Target Process ID": "postgres",
            "Source Application": "Shop",
            "Target Application": "Shop DB",
        },
    )

    rec = parse_dependency_row(row)

    assert rec is not None
    assert rec.source == "web-01"
    assert rec.destination == "db-01"
    assert rec.port == 5432
    assert rec.protocol == "TCP"
    assert rec.service_name == "postgres"
    assert rec.source_app == "Shop"
    assert rec.destination_app == "Shop DB"
    assert rec.source_ip is None
    assert rec.port_recovered is False
    print(f"[TEST] {rec.label}: {rec.source} -> {rec.destination}")


def test_spanish_headers():
    row = {"Origen": "srv-a", "Destino": "srv-b", "Puerto": "8080/tcp", "Protocolo": "udp"}

    rec = parse_dependency_row(row)

    assert rec.source == "srv-a"
    assert rec.destination == "srv-b"
    assert rec.port == 8080
    assert rec.protocol == "UDP"


def test_missing_protocol_defaults_to_tcp():
    rec = parse_dependency_row({"Source": "a", "Destination": "b", "Port": 443.0})

    assert rec.protocol == "TCP"
    assert rec.port == 443


def test_column_feeds_one_field_only():
    rec = parse_dependency_row({"Source": "a-host", "Destination": "b-host"})

    # "Source" partially matches "source application" but is already taken
    assert rec.source_app is None
    assert rec.destination_app is None
    assert rec.source_ip is None


def test_rows_without_endpoints_are_skipped():
    assert parse_dependency_row(make_row("app-02", "", "443")) is None
    assert parse_dependency_row(make_row("", "db-01", "443")) is None
    assert parse_dependency_row(make_row("   ", "db-01")) is None
    assert parse_dependency_row({"Hostname": "x"}) is None
    assert parse_dependency_row("not a row") is None


def test_blank_endpoint_never_borrows_a_sibling_column():
    # an empty "Destination" must not fall through to "Destination Port"
    row = {"Source": "web-01", "Destination": "", "Destination Port": "443"}
    assert parse_dependency_row(row) is None

    row = {"Source": "web-01", "Destination": "", "Source App": "Shop", "Destination App": "CRM"}
    assert parse_dependency_row(row) is None

    row = {"Origen": "", "IP Origen": "10.0.0.1", "Aplicacion Origen": "ERP", "Destino": "srv-b"}
    assert parse_dependency_row(row) is None

    # no endpoint header at all: other fields' headers stay off-limits
    row = {"Source Host": "web-01", "Destination App": "CRM", "Destination IP": "10.0.0.2"}
    assert parse_dependency_row(row) is None


def test_blank_endpoint_rows_are_dropped_from_extraction():
    sheets = {
        "Flows": [
            {"Source": "web-01", "Destination": "", "Source App": "Shop", "Destination App": "CRM"},
            {"Source": "a-host", "Destination": "b-host", "Source App": "Shop", "Destination App": "CRM"},
        ]
    }

    result = extract(sheets)

    assert [(r.source, r.destination) for r in result.records] == [("a-host", "b-host")]
    assert result.records[0].destination_app == "CRM"


def test_port_parsing():
    assert parse_port("443") == 443
    assert parse_port("443/tcp") == 443
    assert parse_port(8080.0) == 8080
    assert parse_port("") is None
    assert parse_port(None) is None
    assert parse_port("0") is None
    assert parse_port("70000") is None
    assert parse_port("any") is None


def test_invalid_port_column_keeps_record():
    rec = parse_dependency_row(make_row("a", "b", "99999"))

    assert rec is not None
    assert rec.port is None
    assert rec.port_recovered is False


def test_port_recovered_from_unlabelled_column():
    row = {"Source": "a-host", "Destination": "b-host", "Notes": "3306"}

    rec = parse_dependency_row(row)

    assert rec.port == 3306
    assert rec.port_recovered is True


def test_recover_port_skips_claimed_and_non_numeric_cells():
    row = {"Source": "10", "Notes": "see 443", "Count": "123456", "Other": "22"}

    assert recover_port(row, skip_columns={"Source"}) == 22
    assert recover_port({"Notes": "none"}) is None


def test_cell_text_and_short_headers():
    assert cell_text(float("nan")) == ""
    assert cell_text(None) == ""
    assert cell_text(443.0) == "443"
    assert cell_text("  web-01 ") == "web-01"

    # "IP" is too short for a partial match
    assert first_matching_column({"IP": "10.0.0.1"}, ["source ip"]) is None
    assert first_matching_column({"source ip": "10.0.0.1"}, ["source ip"]) == "source ip"


def test_sheet_classification():
    assert sheet_rank("Server Communication") == 0
    assert sheet_rank("Communication") == 1
    assert sheet_rank("Dependencias") == 2
    assert sheet_rank("Inventory") == 5

    assert is_database_sheet("Databases")
    assert is_database_sheet("Bases de Datos")
    assert not is_database_sheet("DB Dependencies")
    assert not is_database_sheet("Servers")
    assert is_database_sheet("Prod DB")
    assert is_database_sheet("db_list")
    # "db" inside another word is not a database sheet
    assert not is_database_sheet("Feedback")
    assert not is_database_sheet("Sandbox Hosts")


def test_extract_scans_every_sheet():
    sheets = {
        "Notes": [],
        "Inventory": [{"Name": "a", "OS": "linux"}],
        "Server Communication": [
            make_row("web-01", "api-01", 443, **{"Source Application": "Shop"}),
            make_row("api-01", "db-01", 5432),
            make_row("app-02", "", 80),
        ],
        "Dependencias": [
            {"Origen": "batch-01", "Destino": "db-01", "Puerto": "5432"},
        ],
    }

    result = extract(sheets)

    assert [r.source for r in result.records] == ["web-01", "api-01", "batch-01"]
    assert result.servers == ["web-01", "api-01", "db-01", "batch-01"]
    assert result.applications == ["Shop"]
    assert result.summary["totalDependencies"] == 3
    assert result.summary["uniqueServers"] == 4
    assert result.summary["uniquePorts"] == 2
    assert result.summary["sheetsScanned"] == 4
    assert result.summary["sheetsUsed"] == 2
    print(f"[TEST] Summary: {result.summary}")


def test_extract_accepts_unnamed_sheets():
    result = extract([[make_row("a", "b", 22)]])

    assert len(result.records) == 1


def test_database_inventory_matching():
    sheets = {
        "Server Communication": [
            make_row("web-01", "db-01.corp.local", 5432),
        ],
        "Databases": [
            {"Database Name": "orders", "Server": "db-01", "Edition": "Enterprise"},
            {"Database Name": "archive", "Server": "legacy-sql-09", "Edition": "Standard"},
        ],
    }

    result = extract(sheets)

    assert result.summary["totalDependencies"] == 1
    assert result.summary["totalDatabases"] == 2
    assert result.summary["databasesWithDependencies"] == 1
    assert result.summary["databasesWithoutDependencies"] == 1

    orders = result.databases[0]
    assert orders.edition == "Enterprise"
    assert len(orders.as_destination) == 1
    assert orders.as_source == []

    assert [db.database_name for db in result.databases_without_dependencies] == ["archive"]


def test_no_records_raises():
    with pytest.raises(ExtractionError) as exc:
        extract({"Servers": [{"Name": "a", "OS": "linux"}], "Empty": []})

    assert exc.value.sheets_scanned == 2
    assert "source and destination" in str(exc.value)


if __name__ == "__main__":
    test_english_export_columns()
    test_spanish_headers()
    test_missing_protocol_defaults_to_tcp()
    test_column_feeds_one_field_only()
    test_rows_without_endpoints_are_skipped()
    test_blank_endpoint_never_borrows_a_sibling_column()
    test_blank_endpoint_rows_are_dropped_from_extraction()
    test_port_parsing()
    test_invalid_port_column_keeps_record()
    test_port_recovered_from_unlabelled_column()
    test_recover_port_skips_claimed_and_non_numeric_cells()
    test_cell_text_and_short_headers()
    test_sheet_classification()
    test_extract_scans_every_sheet()
    test_extract_accepts_unnamed_sheets()
    test_database_inventory_matching()
    test_no_records_raises()
    print("✅ Extractor tests complete!")
