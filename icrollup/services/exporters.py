"""Spreadsheet and PDF renditions of the rollup tree.

Both exports walk the same grouped tree. The row matrix is the shared
layout: one header row, a full-width row per component and per standard,
and one row per (condition, action) where the condition columns are only
filled on the condition's first row. Merge ranges are recorded next to the
rows so that a flat row format can still show merged condition cells.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import date

from fpdf import FPDF
from fpdf.enums import XPos, YPos
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from icrollup.services.collation import ascii_fold, truncate, turkish_upper
from icrollup.services.domain import (
    ALL_UNITS_LABEL,
    AllUnits,
    Assignment,
    RealAction,
    RollupRow,
)
from icrollup.services.grouping import ComponentGroup, ConditionGroup

EXPORT_HEADERS = (
    "Standart Kod No",
    "Kamu İç Kontrol Standardı ve Genel Şartı",
    "Mevcut Durum",
    "Eylem Kod",
    "Öngörülen Eylem/Eylemler",
    "Sorumlu Birim/ler",
    "İşbirliği Yapılacak Birim",
    "Çıktı/Sonuç",
    "Tamamlanma Tarihi",
    "Açıklama",
)
COLUMN_COUNT = len(EXPORT_HEADERS)
COLUMN_WIDTHS = (15, 50, 40, 12, 50, 25, 25, 20, 15, 30)

# Columns holding condition data, merged across the condition's rows
CONDITION_COLUMNS = (0, 1, 2)

REASONABLE_ASSURANCE_TEXT = "Mevcut durum makul güvence sağlamaktadır"
PLACEHOLDER = "-"
SHEET_TITLE = "Eylem Planı"

ROW_HEADER = "header"
ROW_COMPONENT = "component"
ROW_STANDARD = "standard"
ROW_DATA = "data"


@dataclass
class ExportMatrix:
    """Row-oriented export layout.

    ``merges`` holds zero-based inclusive ``(first_row, first_col,
    last_row, last_col)`` ranges.
    """

    rows: list[list[str]] = field(default_factory=list)
    kinds: list[str] = field(default_factory=list)
    # True for data rows after the first row of their condition
    continued: list[bool] = field(default_factory=list)
    merges: list[tuple[int, int, int, int]] = field(default_factory=list)
    widths: tuple[int, ...] = COLUMN_WIDTHS
    action_count: int = 0

    def append(self, row: list[str], kind: str, continued: bool = False) -> int:
        self.rows.append(row)
        self.kinds.append(kind)
        self.continued.append(continued)
        return len(self.rows) - 1

    @property
    def data_row_count(self) -> int:
        return sum(1 for kind in self.kinds if kind == ROW_DATA)


def format_date(value: date | None) -> str:
    return value.strftime("%d.%m.%Y") if value else PLACEHOLDER


def format_assignment(assignment: Assignment, names: tuple[str, ...], special_labels: tuple[str, ...]) -> str:
    if isinstance(assignment, AllUnits):
        return ALL_UNITS_LABEL
    return ", ".join(names + special_labels) or PLACEHOLDER


def _action_columns(row: RollupRow, condition: ConditionGroup) -> list[str]:
    if not isinstance(row, RealAction):
        message = REASONABLE_ASSURANCE_TEXT if condition.provides_reasonable_assurance else row.title
        return [PLACEHOLDER, message] + [PLACEHOLDER] * 5

    record = row.record
    return [
        record.code or PLACEHOLDER,
        record.title,
        format_assignment(record.responsible, row.responsible_names, row.responsible_special_labels),
        format_assignment(record.collaborating, row.collaborating_names, row.collaborating_special_labels),
        record.output_result or PLACEHOLDER,
        format_date(record.completion_date or record.target_date),
        record.notes or PLACEHOLDER,
    ]


def build_export_matrix(tree: list[ComponentGroup]) -> ExportMatrix:
    """Lay the rollup tree out as rows for flat formats."""
    matrix = ExportMatrix()
    matrix.append(list(EXPORT_HEADERS), ROW_HEADER)
    blank_tail = [""] * (COLUMN_COUNT - 1)

    for component in tree:
        index = matrix.append([turkish_upper(component.name)] + blank_tail, ROW_COMPONENT)
        matrix.merges.append((index, 0, index, COLUMN_COUNT - 1))

        for standard in component.standards:
            label = f"{standard.code} - {standard.name}" if standard.code else standard.name
            index = matrix.append([label] + blank_tail, ROW_STANDARD)
            matrix.merges.append((index, 0, index, COLUMN_COUNT - 1))

            for condition in standard.conditions:
                first_index = None
                for position, row in enumerate(condition.rows):
                    if position == 0:
                        lead = [
                            condition.code or PLACEHOLDER,
                            condition.description,
                            condition.current_situation or PLACEHOLDER,
                        ]
                    else:
                        lead = ["", "", ""]
                    index = matrix.append(lead + _action_columns(row, condition), ROW_DATA, continued=position > 0)
                    if isinstance(row, RealAction):
                        matrix.action_count += 1
                    if first_index is None:
                        first_index = index

                if first_index is not None and len(condition.rows) > 1:
                    last_index = first_index + len(condition.rows) - 1
                    for column in CONDITION_COLUMNS:
                        matrix.merges.append((first_index, column, last_index, column))

    return matrix


# ─── XLSX ────────────────────────────────────────────────────────────────────

HEADER_FILL = PatternFill(start_color="D0D0D0", end_color="D0D0D0", fill_type="solid")
COMPONENT_FILL = PatternFill(start_color="C8C8C8", end_color="C8C8C8", fill_type="solid")
STANDARD_FILL = PatternFill(start_color="DCDCDC", end_color="DCDCDC", fill_type="solid")
HEADER_FONT = Font(bold=True)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)
CELL_ALIGNMENT = Alignment(vertical="top", wrap_text=True)


def export_xlsx(matrix: ExportMatrix) -> io.BytesIO:
    """Write the row matrix to an .xlsx workbook held in memory."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    for row_index, (values, kind) in enumerate(zip(matrix.rows, matrix.kinds), 1):
        for col_index, value in enumerate(values, 1):
            cell = ws.cell(row=row_index, column=col_index, value=value)
            cell.border = THIN_BORDER
            if kind == ROW_HEADER:
                cell.fill = HEADER_FILL
                cell.font = HEADER_FONT
                cell.alignment = HEADER_ALIGNMENT
            elif kind == ROW_COMPONENT:
                cell.fill = COMPONENT_FILL
                cell.font = HEADER_FONT
            elif kind == ROW_STANDARD:
                cell.fill = STANDARD_FILL
                cell.font = HEADER_FONT
            else:
                cell.alignment = CELL_ALIGNMENT

    for first_row, first_col, last_row, last_col in matrix.merges:
        ws.merge_cells(
            start_row=first_row + 1,
            start_column=first_col + 1,
            end_row=last_row + 1,
            end_column=last_col + 1,
        )

    for col_index, width in enumerate(matrix.widths, 1):
        ws.column_dimensions[get_column_letter(col_index)].width = width
    ws.freeze_panes = "A2"

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf


# ─── PDF ─────────────────────────────────────────────────────────────────────

# A4 landscape with 10 mm margins leaves 277 mm for the table
PDF_COLUMN_WIDTHS_MM = (14.5, 49.0, 39.5, 12.0, 49.0, 24.5, 24.5, 19.5, 14.5, 30.0)
# Character budgets per column at the body font size
PDF_TEXT_LIMITS = (10, 38, 30, 8, 38, 18, 18, 14, 10, 22)
PDF_HEADER_LIMITS = (11, 40, 32, 9, 40, 19, 19, 15, 11, 24)
PDF_ROW_HEIGHT = 6
PDF_BODY_FONT_SIZE = 7
PDF_HEADER_FONT_SIZE = 6
PDF_FONT = "Helvetica"


def pdf_text(value: str, limit: int | None = None) -> str:
    """Prepare text for the PDF core fonts.

    The built-in fonts only cover Latin-1 and miss several Turkish letters
    (ğ, ş, ı, İ), so text is folded to ASCII; this is a renderer limitation,
    the other exports keep the original spelling.
    """
    text = ascii_fold(" ".join(value.split()))
    return truncate(text, limit) if limit is not None else text


class RollupPDF(FPDF):
    """Landscape table document that repeats the column header per page."""

    def __init__(self, title: str, subtitle_lines: list[str]) -> None:
        super().__init__(orientation="L", unit="mm", format="A4")
        self.report_title = title
        self.subtitle_lines = subtitle_lines
        self.set_margins(10, 10, 10)
        self.set_auto_page_break(auto=True, margin=12)

    def header(self) -> None:
        if self.page_no() == 1:
            self.set_font(PDF_FONT, "B", 14)
            self.cell(0, 8, pdf_text(self.report_title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            self.set_font(PDF_FONT, "", 9)
            for line in self.subtitle_lines:
                self.cell(0, 5, pdf_text(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            self.ln(2)

        self.set_font(PDF_FONT, "B", PDF_HEADER_FONT_SIZE)
        self.set_fill_color(180, 180, 180)
        for label, width, limit in zip(EXPORT_HEADERS, PDF_COLUMN_WIDTHS_MM, PDF_HEADER_LIMITS):
            self.cell(width, PDF_ROW_HEIGHT, pdf_text(label, limit), border=1, align="C", fill=True)
        self.ln(PDF_ROW_HEIGHT)

    def footer(self) -> None:
        self.set_y(-10)
        self.set_font(PDF_FONT, "I", 7)
        self.cell(0, 6, f"Sayfa {self.page_no()}/{{nb}}", align="C")

    def section_row(self, text: str, shade: int) -> None:
        self.set_font(PDF_FONT, "B", PDF_BODY_FONT_SIZE)
        self.set_fill_color(shade, shade, shade)
        self.cell(
            sum(PDF_COLUMN_WIDTHS_MM), PDF_ROW_HEIGHT, pdf_text(text, 160),
            border=1, fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )

    def data_row(self, values: list[str], continued: bool = False) -> None:
        self.set_font(PDF_FONT, "", PDF_BODY_FONT_SIZE)
        for column, (value, width, limit) in enumerate(zip(values, PDF_COLUMN_WIDTHS_MM, PDF_TEXT_LIMITS)):
            # Continuation rows of a condition leave its columns open
            border = "LR" if continued and column in CONDITION_COLUMNS else 1
            self.cell(width, PDF_ROW_HEIGHT, pdf_text(value, limit), border=border)
        self.ln(PDF_ROW_HEIGHT)


def pdf_subtitle_lines(matrix: ExportMatrix, generated_on: date) -> list[str]:
    """Generation date and the number of real actions in the export."""
    return [
        f"Oluşturma Tarihi: {format_date(generated_on)}",
        f"Toplam Eylem: {matrix.action_count}",
    ]


def export_pdf(matrix: ExportMatrix, generated_on: date | None = None, title: str = "EYLEM PLANI") -> bytes:
    """Render the row matrix as a paginated A4 landscape table."""
    if generated_on is None:
        generated_on = date.today()

    pdf = RollupPDF(title=title, subtitle_lines=pdf_subtitle_lines(matrix, generated_on))
    pdf.add_page()

    for values, kind, continued in zip(matrix.rows, matrix.kinds, matrix.continued):
        if kind == ROW_HEADER:
            continue
        if kind == ROW_COMPONENT:
            pdf.section_row(values[0], 200)
        elif kind == ROW_STANDARD:
            pdf.section_row(values[0], 220)
        else:
            pdf.data_row(values, continued=continued)

    return bytes(pdf.output())
