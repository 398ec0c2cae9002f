import re
from typing import Any, Collection, Mapping, Optional

from depmap.extraction.columns import cell_text
from depmap.ir.dependency_ir import MIN_PORT, MAX_PORT

_NON_DIGITS = re.compile(r"[^0-9]")
_PORT_TOKEN = re.compile(r"\d{1,5}")


def parse_port(value: Any) -> Optional[int]:
    """
    Strip everything but digits ("443/tcp" -> 443).
    Anything outside 1-65535 is an unknown port (None).
    """
    text = _NON_DIGITS.sub("", cell_text(value))
    if not text:
        return None

    port = int(text)
    if port < MIN_PORT or port > MAX_PORT:
        return None
    return port


def recover_port(
    row: Mapping[str, Any], skip_columns: Collection[str] = ()
) -> Optional[int]:
    """
    Best-effort port for rows without a usable port column: the first cell
    (outside `skip_columns`) that is a single standalone 1-5 digit number in
    the valid range.

    Low confidence: callers flag records built from this value.
    """
    for key, value in row.items():
        if key in skip_columns:
            continue

        text = cell_text(value)
        if not _PORT_TOKEN.fullmatch(text):
            continue

        port = int(text)
        if MIN_PORT <= port <= MAX_PORT:
            return port

    return None
