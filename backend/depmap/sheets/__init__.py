from depmap.sheets.loader import load_sheets, SUPPORTED_EXTENSIONS

__all__ = ["load_sheets", "SUPPORTED_EXTENSIONS"]
