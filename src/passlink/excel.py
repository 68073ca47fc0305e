# src/passlink/excel.py
from __future__ import annotations

import csv
import re
from pathlib import Path
from typing import List, Optional

import pandas as pd

__all__ = [
    "safe_sheet_name",
    "write_txt",
    "write_csv",
    "write_workbook",
]


def safe_sheet_name(name: str) -> str:
    bad = r'[:\\/*?[\]]'
    s = re.sub(bad, "_", name)
    return s[:31] if len(s) > 31 else s


def write_txt(path: Path, passwords: List[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(passwords) + "\n", encoding="utf-8")


def write_csv(path: Path, passwords: List[str], header: str = "password") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=[header])
        w.writeheader()
        for pw in passwords:
            w.writerow({header: pw})


def write_workbook(path: Path, passwords: List[str], *, sheet: str = "Passwords",
                   share_url: Optional[str] = None) -> None:
    """
    One sheet with an index/password table. If share_url is given it is
    written above the table so the workbook records how it was generated.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(
        {
            "index": list(range(1, len(passwords) + 1)),
            "password": passwords,
        }
    )
    sheet = safe_sheet_name(sheet)
    with pd.ExcelWriter(path, engine="xlsxwriter") as writer:
        df.to_excel(writer, sheet_name=sheet, startrow=2, index=False)
        wb = writer.book
        ws = writer.sheets[sheet]
        header_fmt = wb.add_format({"bold": True, "font_color": "blue", "font_size": 14})
        link_fmt = wb.add_format({"font_color": "blue", "underline": 1})
        ws.write("A1", "Generated passwords", header_fmt)
        if share_url:
            ws.write_url("B1", share_url, link_fmt, share_url)
        for i, col in enumerate(df.columns):
            try:
                max_len = max(df[col].astype(str).map(len).max(), len(str(col)))
            except ValueError:
                max_len = len(str(col))
            ws.set_column(i, i, max_len + 2)

