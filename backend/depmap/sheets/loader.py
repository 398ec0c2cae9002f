# backend/depmap/sheets/loader.py
"""
Spreadsheet decoding for uploads: bytes -> {sheet name: [row dict, ...]}.

Only decoding happens here; column interpretation belongs to the extractor.
"""

import io
from pathlib import Path
from typing import Dict, List

import pandas as pd

# legacy .xls needs xlrd, which is not a dependency
SUPPORTED_EXTENSIONS = (".xlsx", ".xlsm", ".csv")


def _frame_rows(frame: pd.DataFrame) -> List[dict]:
    frame = frame.dropna(how="all")
    frame.columns = [str(c).strip() for c in frame.columns]
    frame = frame.astype(object).where(pd.notna(frame), "")
    return frame.to_dict(orient="records")


def load_sheets(filename: str, content: bytes) -> Dict[str, List[dict]]:
    """
    Decode every tab of a workbook (or a single CSV) into row dicts.
    Blank cells become "".

    Raises ValueError for unsupported or unreadable files.
    """
    suffix = Path(filename or "").suffix.lower()

    if suffix not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"Unsupported file type '{suffix or filename}'. "
            f"Expected one of: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    if not content:
        raise ValueError("Uploaded file is empty")

    try:
        if suffix == ".csv":
            frames = {Path(filename).stem or "Sheet1": pd.read_csv(io.BytesIO(content))}
        else:
            frames = pd.read_excel(io.BytesIO(content), sheet_name=None)
    except Exception as e:
        raise ValueError(f"Could not read '{filename}': {e}") from e

    sheets = {str(name): _frame_rows(frame) for name, frame in frames.items()}

    print(f"[Sheets] {filename}: {len(sheets)} tabs -> {list(sheets)}")
    return sheets
