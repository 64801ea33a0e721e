from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

BASE_HEADERS: List[str] = ["ID", "Title", "Steps", "Expected Result", "Priority"]
EXECUTION_STATUS_HEADER = "Execution Status"

# Character widths per column, in header order.
COLUMN_WIDTHS: List[int] = [15, 40, 60, 60, 15, 18]


def export_filename(on: Optional[date] = None) -> str:
    """TestCases_<YYYY-MM-DD>.xlsx"""
    return f"TestCases_{(on or date.today()).isoformat()}.xlsx"


def rows_to_excel(
    rows: Iterable[Sequence[object]],
    *,
    include_execution_status: bool = False,
    directory: Optional[Path] = None,
    on: Optional[date] = None,
) -> str:
    """
    Write ordered test case rows to a workbook and return its path.

    Each row is ``(id, title, steps, expected_result, priority)`` with a
    trailing execution status when ``include_execution_status`` is set.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Test Cases"

    headers = list(BASE_HEADERS)
    if include_execution_status:
        headers.append(EXECUTION_STATUS_HEADER)

    bold_font = Font(bold=True)
    ws.append(headers)
    for col_idx, _ in enumerate(headers, start=1):
        ws.cell(row=1, column=col_idx).font = bold_font

    wrap = Alignment(wrap_text=True, vertical="top")
    for row in rows:
        values = ["" if value is None else value for value in row][: len(headers)]
        ws.append(values)
        for cell in ws[ws.max_row]:
            cell.alignment = wrap

    for col_idx in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = COLUMN_WIDTHS[col_idx - 1]

    out_dir = directory or Path(tempfile.gettempdir())
    out_path = Path(out_dir) / export_filename(on)
    wb.save(str(out_path))
    return str(out_path)
