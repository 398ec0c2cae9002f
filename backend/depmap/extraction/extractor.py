# backend/depmap/extraction/extractor.py
"""
Record Extractor - turns loosely-typed spreadsheet rows into DependencyRecords.

Input is already decoded: an ordered mapping of sheet name -> rows, where
each row is a dict of header -> cell value (see depmap.sheets.loader).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from depmap.extraction.columns import (
    DATABASE_ALIASES,
    FIELD_ALIASES,
    is_database_sheet,
    resolve_fields,
    sheet_rank,
)
from depmap.extraction.ports import parse_port, recover_port
from depmap.ir.database_ir import DatabaseInfo
from depmap.ir.dependency_ir import DEFAULT_PROTOCOL, DependencyRecord
from depmap.ir.errors import ExtractionError

Row = Mapping[str, Any]
Sheets = Union[Mapping[str, Sequence[Row]], Sequence[Sequence[Row]]]


@dataclass
class ExtractionResult:
    records: List[DependencyRecord] = field(default_factory=list)
    servers: List[str] = field(default_factory=list)        # first-occurrence order
    applications: List[str] = field(default_factory=list)
    databases: List[DatabaseInfo] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)

    @property
    def databases_without_dependencies(self) -> List[DatabaseInfo]:
        return [db for db in self.databases if not db.has_dependencies]

    def to_dict(self) -> dict:
        return {
            "summary": dict(self.summary),
            "servers": list(self.servers),
            "applications": list(self.applications),
            "allDependencies": [r.to_dict() for r in self.records],
            "databases": [db.to_dict() for db in self.databases],
            "databasesWithoutDependencies": [
                db.to_dict() for db in self.databases_without_dependencies
            ],
        }


# -------------------------
# Row parsing
# -------------------------

def parse_dependency_row(row: Row) -> Optional[DependencyRecord]:
    """
    One row -> one record, or None when the row has no usable
    source/destination pair. Never raises for messy input.
    """
    if not isinstance(row, Mapping):
        return None

    resolved = resolve_fields(row, FIELD_ALIASES)

    _, source = resolved["source"]
    _, destination = resolved["destination"]

    if not source or not destination:
        return None

    port_col, port_text = resolved["port"]
    port = parse_port(port_text) if port_col is not None else None
    port_recovered = False

    if port_col is None:
        used = {col for col, _ in resolved.values() if col is not None}
        port = recover_port(row, skip_columns=used)
        port_recovered = port is not None

    _, protocol = resolved["protocol"]
    _, service = resolved["service"]
    _, source_app = resolved["source_app"]
    _, destination_app = resolved["destination_app"]
    _, source_ip = resolved["source_ip"]
    _, destination_ip = resolved["destination_ip"]

    try:
        return DependencyRecord(
            source=source,
            destination=destination,
            port=port,
            protocol=protocol or DEFAULT_PROTOCOL,
            service_name=service or None,
            source_app=source_app or None,
            destination_app=destination_app or None,
            source_ip=source_ip or None,
            destination_ip=destination_ip or None,
            port_recovered=port_recovered,
        )
    except ValueError:
        return None


def parse_database_row(row: Row) -> Optional[DatabaseInfo]:
    if not isinstance(row, Mapping):
        return None

    resolved = resolve_fields(row, DATABASE_ALIASES)
    _, database_name = resolved["database_name"]
    _, server_id = resolved["server_id"]

    if not database_name or not server_id:
        return None

    return DatabaseInfo(
        database_name=database_name,
        server_id=server_id,
        database_id=resolved["database_id"][1] or None,
        edition=resolved["edition"][1] or None,
    )


def match_database_dependencies(
    databases: List[DatabaseInfo], records: Sequence[DependencyRecord]
) -> None:
    for db in databases:
        db.as_source = [r for r in records if db.matches(r.source)]
        db.as_destination = [r for r in records if db.matches(r.destination)]


# -------------------------
# Sheet handling
# -------------------------

def _named_sheets(sheets: Sheets) -> List[tuple]:
    if isinstance(sheets, Mapping):
        named = [(str(name), rows) for name, rows in sheets.items()]
    else:
        named = [(f"Sheet{i + 1}", rows) for i, rows in enumerate(sheets)]

    # communication / dependency tabs first, otherwise workbook order
    return sorted(named, key=lambda item: sheet_rank(item[0]))


def extract(sheets: Sheets) -> ExtractionResult:
    """
    Scan every sheet and collect dependency records.

    Raises ExtractionError only when no sheet produced a valid record.
    """
    named = _named_sheets(sheets)
    print(f"[Extractor] Scanning {len(named)} sheets: {[name for name, _ in named]}")

    records: List[DependencyRecord] = []
    databases: List[DatabaseInfo] = []
    sheets_used = 0

    for name, rows in named:
        rows = list(rows or [])

        if is_database_sheet(name):
            parsed = [db for db in (parse_database_row(r) for r in rows) if db]
            databases.extend(parsed)
            print(f"[Extractor] Sheet '{name}': {len(parsed)} databases")
            continue

        sheet_records = [rec for rec in (parse_dependency_row(r) for r in rows) if rec]

        if not sheet_records:
            print(f"[Extractor] [WARN] Sheet '{name}' has no dependency rows, skipping")
            continue

        skipped = len(rows) - len(sheet_records)
        print(
            f"[Extractor] Sheet '{name}': {len(sheet_records)} dependencies"
            f" ({skipped} rows skipped)"
        )
        records.extend(sheet_records)
        sheets_used += 1

    if not records:
        raise ExtractionError(
            "No valid dependency records were found in the file. "
            "Re-check that it contains source and destination server columns.",
            sheets_scanned=len(named),
        )

    servers: Dict[str, None] = {}
    applications: Dict[str, None] = {}
    ports = set()

    for rec in records:
        servers.setdefault(rec.source)
        servers.setdefault(rec.destination)
        if rec.source_app:
            applications.setdefault(rec.source_app)
        if rec.destination_app:
            applications.setdefault(rec.destination_app)
        if rec.port is not None:
            ports.add(rec.port)

    if databases:
        match_database_dependencies(databases, records)

    with_deps = sum(1 for db in databases if db.has_dependencies)

    summary = {
        "totalDependencies": len(records),
        "uniqueServers": len(servers),
        "uniqueApplications": len(applications),
        "uniquePorts": len(ports),
        "recoveredPorts": sum(1 for rec in records if rec.port_recovered),
        "totalDatabases": len(databases),
        "databasesWithDependencies": with_deps,
        "databasesWithoutDependencies": len(databases) - with_deps,
        "sheetsScanned": len(named),
        "sheetsUsed": sheets_used,
    }

    print(
        f"[Extractor] ✅ {summary['totalDependencies']} dependencies, "
        f"{summary['uniqueServers']} servers, "
        f"{summary['uniqueApplications']} applications, "
        f"{summary['totalDatabases']} databases"
    )

    return ExtractionResult(
        records=records,
        servers=list(servers),
        applications=list(applications),
        databases=databases,
        summary=summary,
    )
