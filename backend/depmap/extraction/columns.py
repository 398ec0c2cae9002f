"""
Header aliases for the dependency spreadsheets.

Discovery exports (AWS MPA, Concierto, hand-made inventories) never agree on
column names, so each logical field carries an ordered list of accepted
headers. Resolution is done by one generic lookup, `first_matching_value`.
"""

import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple


FIELD_ALIASES: Dict[str, List[str]] = {
    "source": [
        "source server id",
        "source_server_id",
        "sourceserverid",
        "source server",
        "source hostname",
        "source host",
        "servidor origen",
        "origen",
        "source",
        "src",
    ],
    "destination": [
        "target server id",
        "target_server_id",
        "targetserverid",
        "target server",
        "destination server",
        "target hostname",
        "target host",
        "servidor destino",
        "destino",
        "destination",
        "target",
        "dst",
    ],
    "port": [
        "communication port",
        "communication_port",
        "communicationport",
        "destination port",
        "target port",
        "dest port",
        "puerto",
        "port",
    ],
    "protocol": [
        "protocol",
        "protocolo",
        "ip protocol",
        "transport protocol",
        "proto",
    ],
    "service": [
        "target process id",
        "target_process_id",
        "targetprocessid",
        "service name",
        "servicio",
        "process id",
        "process",
        "service",
    ],
    "source_app": [
        "source application",
        "source app",
        "source_app",
        "aplicacion origen",
        "aplicación origen",
    ],
    "destination_app": [
        "target application",
        "destination application",
        "target app",
        "destination app",
        "destination_app",
        "aplicacion destino",
        "aplicación destino",
    ],
    "source_ip": [
        "source ip address",
        "source ip",
        "source_ip",
        "ip origen",
        "src ip",
    ],
    "destination_ip": [
        "target ip address",
        "destination ip address",
        "target ip",
        "destination ip",
        "destination_ip",
        "ip destino",
        "dst ip",
    ],
}


DATABASE_ALIASES: Dict[str, List[str]] = {
    "database_name": [
        "database name",
        "database_name",
        "db name",
        "db_name",
        "nombre base de datos",
        "nombre_bd",
        "database",
        "bd",
    ],
    "server_id": [
        "server id",
        "server_id",
        "server name",
        "server_name",
        "host_name",
        "hostname",
        "vm name",
        "servidor",
        "server",
        "host",
    ],
    "database_id": [
        "database id",
        "database_id",
        "db id",
        "db_id",
    ],
    "edition": [
        "database edition",
        "db edition",
        "sql edition",
        "edition",
        "edicion",
        "edición",
        "version",
        "engine",
    ],
}


# Sheets whose name contains one of these are read first, in this order.
SHEET_PRIORITY: List[Tuple[str, ...]] = [
    ("server", "communication"),
    ("communication",),
    ("dependenc",),
    ("comunicacion",),
    ("dependencia",),
]

# "db" only as a word of its own: "Prod DB", "db_list", not "Feedback"
DATABASE_SHEET_PATTERN = re.compile(
    r"database|bases? de datos|(?<![a-z])db(?![a-z])", re.IGNORECASE
)

MIN_PARTIAL_HEADER = 3


def cell_text(value: Any) -> str:
    """Loosely-typed cell -> trimmed text ('' for blanks/NaN, 443.0 -> '443')."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def first_matching_column(
    row: Mapping[str, Any],
    aliases: Iterable[str],
    exclude: Optional[Set[str]] = None,
    reserved: Optional[Set[str]] = None,
) -> Optional[str]:
    """
    Return the first column of `row` accepted by `aliases` that holds a
    non-empty value.

    For each alias in priority order: exact (case-insensitive) header match,
    then substring match in either direction. Columns in `exclude` are
    never returned; columns in `reserved` are only taken on an exact match.

    When the row carries a header that is exactly one of `aliases`, only
    exact matches count: a blank "Destination" cell leaves the field empty
    instead of falling through to "Destination Port".
    """
    exclude = exclude or set()
    reserved = reserved or set()
    wanted_all = [alias.lower() for alias in aliases]
    headers = [
        (key, str(key).strip().lower()) for key in row.keys() if key not in exclude
    ]
    has_exact_header = any(header in wanted_all for _, header in headers)

    for wanted in wanted_all:
        for key, header in headers:
            if header == wanted and cell_text(row[key]):
                return key

        if has_exact_header:
            continue

        for key, header in headers:
            # two-letter headers ("ID", "IP") are only matched exactly
            if key in reserved or len(header) < MIN_PARTIAL_HEADER:
                continue
            if (wanted in header or header in wanted) and cell_text(row[key]):
                return key

    return None


def first_matching_value(
    row: Mapping[str, Any], aliases: Iterable[str]
) -> Optional[str]:
    key = first_matching_column(row, aliases)
    if key is None:
        return None
    return cell_text(row[key])


def _exact_owners(table: Mapping[str, List[str]]) -> Dict[str, str]:
    """lower-cased alias -> the field it belongs to"""
    owners: Dict[str, str] = {}
    for field_name, aliases in table.items():
        for alias in aliases:
            owners.setdefault(alias.lower(), field_name)
    return owners


def resolve_fields(
    row: Mapping[str, Any], table: Mapping[str, List[str]]
) -> Dict[str, Tuple[Optional[str], Optional[str]]]:
    """
    Resolve every field of `table` to a (column, value) pair.

    Fields are resolved in table order and a column feeds at most one field:
    a "Source" header already taken by `source` is not reused for
    `source_app` through a partial match. A header that is exactly an alias
    of another field ("Destination Port", "Source App") is never borrowed
    through a partial match either.
    """
    owners = _exact_owners(table)
    resolved = {}
    claimed: Set[str] = set()

    for field_name, aliases in table.items():
        reserved = {
            key for key in row.keys()
            if owners.get(str(key).strip().lower(), field_name) != field_name
        }
        key = first_matching_column(row, aliases, exclude=claimed, reserved=reserved)
        if key is not None:
            claimed.add(key)
        resolved[field_name] = (key, cell_text(row[key]) if key is not None else None)

    return resolved


def sheet_rank(sheet_name: str) -> int:
    name = sheet_name.lower()
    for rank, keywords in enumerate(SHEET_PRIORITY):
        if all(k in name for k in keywords):
            return rank
    return len(SHEET_PRIORITY)


def is_database_sheet(sheet_name: str) -> bool:
    if sheet_rank(sheet_name) < len(SHEET_PRIORITY):
        return False
    return bool(DATABASE_SHEET_PATTERN.search(sheet_name))
