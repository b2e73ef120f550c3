"""Load tabular rows from CSV and XLSX files."""
from typing import Any, Dict, List, Union
from pathlib import Path
import csv
import logging

from openpyxl import load_workbook

from ..exceptions import UnsupportedFormatError

log = logging.getLogger(__name__)


def load_rows(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Load rows keyed by column header.

    CSV files are read with the first line as header. For XLSX files the
    first sheet is used and its first row is the header. Blank rows are
    skipped in both formats.

    Args:
        path: Path to a .csv or .xlsx file

    Returns:
        List[Dict[str, Any]]: Rows in file order

    Raises:
        UnsupportedFormatError: If the extension is not supported
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        rows = _load_csv(path)
    elif suffix == ".xlsx":
        rows = _load_xlsx(path)
    else:
        raise UnsupportedFormatError(f"Unsupported file type: {path.name}")

    log.info(f"Loaded {len(rows)} rows from {path.name}")
    return rows


def _is_blank(values: List[Any]) -> bool:
    return all(value is None or str(value).strip() == "" for value in values)


def _load_csv(path: Path) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        return [dict(row) for row in reader if not _is_blank(list(row.values()))]


def _load_xlsx(path: Path) -> List[Dict[str, Any]]:
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        values = sheet.iter_rows(values_only=True)
        header = next(values, None)
        if header is None:
            return []
        columns = [str(cell) if cell is not None else "" for cell in header]

        rows = []
        for record in values:
            cells = list(record)
            if _is_blank(cells):
                continue
            cells += [None] * (len(columns) - len(cells))
            rows.append(dict(zip(columns, cells)))
        return rows
    finally:
        workbook.close()
