import pandas as pd
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter
import io
import logging
from typing import Any, Dict, List


class ExcelHandler:
    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def export_records(self, records: List[Dict[str, Any]], columns: List[str]) -> io.BytesIO:
        """
        Export records to an in-memory Excel workbook.
        Columns follow the given order; fields a record lacks are left blank.
        """
        df = pd.DataFrame(records, columns=columns)
        df = df.fillna('')

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Records')
            self._style_sheet(writer.sheets['Records'], len(columns), len(df))

        buffer.seek(0)
        self.logger.info(f"Exported {len(df)} records with {len(columns)} columns")
        return buffer

    def _style_sheet(self, ws, column_count: int, row_count: int):
        header_font = Font(bold=True, size=12, color="FFFFFF")
        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        for col in range(1, column_count + 1):
            cell = ws.cell(row=1, column=col)
            cell.font = header_font
            cell.fill = header_fill
            cell.border = border
            cell.alignment = Alignment(horizontal='center', vertical='center')

        # Auto-adjust column widths
        for col_idx in range(1, column_count + 1):
            max_length = 0
            column_letter = get_column_letter(col_idx)
            for row_idx in range(1, row_count + 2):
                cell = ws.cell(row=row_idx, column=col_idx)
                if row_idx > 1:
                    cell.border = border
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))
            ws.column_dimensions[column_letter].width = min(max_length + 2, 50)  # Cap at 50 characters
