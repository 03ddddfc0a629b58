"""
Excel Decision Table Writer.

Writes IR rules to an Excel sheet laid out like the DMN decision table, for
review by people who do not read XML.

Layout:
    Row 1: <Decision name> | Hit Policy: FIRST
    Row 2: Rule | INPUT | INPUT | ... | OUTPUT | OUTPUT | Annotation
    Row 3: Rule | customer | total_amount | ... | discount | ... | Annotation
    Row 4+: rule id | FEEL input entries | FEEL output entries | raw rule text
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from nl_to_dmn.dmn_writer import HIT_POLICY
from nl_to_dmn.feel import collect_variables, input_entry, output_entry
from nl_to_dmn.ir import Rule


HEADER_ROWS = 3


@dataclass
class ExcelWriterConfig:
    """Configuration for Excel output formatting."""
    header_font: Font = field(default_factory=lambda: Font(bold=True))
    input_fill: PatternFill = field(
        default_factory=lambda: PatternFill(
            start_color="E6FFE6", end_color="E6FFE6", fill_type="solid"
        )
    )
    output_fill: PatternFill = field(
        default_factory=lambda: PatternFill(
            start_color="FFE6E6", end_color="FFE6E6", fill_type="solid"
        )
    )
    header_fill: PatternFill = field(
        default_factory=lambda: PatternFill(
            start_color="CCE5FF", end_color="CCE5FF", fill_type="solid"
        )
    )
    column_width: int = 18
    annotation_width: int = 60


@dataclass
class ColumnSpec:
    """One column of the sheet."""
    column_type: str  # "RULE", "INPUT", "OUTPUT" or "ANNOTATION"
    label: str
    variable: str | None = None


class ExcelWriter:
    """Writer for decision tables in Excel format."""

    def __init__(self, config: ExcelWriterConfig | None = None):
        self.config = config or ExcelWriterConfig()
        self.columns: list[ColumnSpec] = []

    def write(
        self,
        rules: Sequence[Rule],
        file_path: str | Path,
        decision_name: str = "Decision",
    ) -> None:
        """Write rules to an Excel file."""
        self._analyze_rules(rules)

        wb = Workbook()
        ws = wb.active
        # Sheet titles: at most 31 characters, none of \ / ? * [ ] :
        ws.title = re.sub(r"[\\/?*\[\]:]", "_", decision_name)[:31] or "Decision"

        self._write_headers(ws, decision_name)
        self._write_data_rows(ws, rules)
        self._apply_formatting(ws)

        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(path)

    def _analyze_rules(self, rules: Sequence[Rule]) -> None:
        """Determine the column structure; same order as the DMN columns."""
        inputs, outputs = collect_variables(rules)
        self.columns = (
            [ColumnSpec("RULE", "Rule")]
            + [ColumnSpec("INPUT", var, var) for var in inputs]
            + [ColumnSpec("OUTPUT", var, var) for var in outputs]
            + [ColumnSpec("ANNOTATION", "Annotation")]
        )

    def _write_headers(self, ws, decision_name: str) -> None:
        ws["A1"] = decision_name
        ws["B1"] = f"Hit Policy: {HIT_POLICY}"

        for col_idx, col_spec in enumerate(self.columns, start=1):
            marker = col_spec.column_type if col_spec.variable else col_spec.label
            ws.cell(row=2, column=col_idx, value=marker)
            ws.cell(row=3, column=col_idx, value=col_spec.label)

    def _write_data_rows(self, ws, rules: Sequence[Rule]) -> None:
        for row_idx, rule in enumerate(rules, start=HEADER_ROWS + 1):
            for col_idx, col_spec in enumerate(self.columns, start=1):
                ws.cell(row=row_idx, column=col_idx, value=self._get_cell_value(rule, col_spec))

    def _get_cell_value(self, rule: Rule, col_spec: ColumnSpec) -> str:
        if col_spec.column_type == "INPUT":
            return input_entry(rule.condition_for(col_spec.variable))
        if col_spec.column_type == "OUTPUT":
            return output_entry(rule.action_for(col_spec.variable))
        if col_spec.column_type == "RULE":
            return rule.id
        return rule.raw_text.strip()

    def _apply_formatting(self, ws) -> None:
        for col in range(1, len(self.columns) + 1):
            ws.cell(row=1, column=col).fill = self.config.header_fill
            ws.cell(row=1, column=col).font = self.config.header_font

            col_spec = self.columns[col - 1]
            for row in range(2, HEADER_ROWS + 1):
                cell = ws.cell(row=row, column=col)
                cell.font = self.config.header_font
                if col_spec.column_type == "INPUT":
                    cell.fill = self.config.input_fill
                elif col_spec.column_type == "OUTPUT":
                    cell.fill = self.config.output_fill
                else:
                    cell.fill = self.config.header_fill

            width = (
                self.config.annotation_width
                if col_spec.column_type == "ANNOTATION"
                else self.config.column_width
            )
            ws.column_dimensions[get_column_letter(col)].width = width


def write_excel(
    rules: Sequence[Rule],
    file_path: str | Path,
    decision_name: str = "Decision",
) -> None:
    """Convenience function to write rules to Excel."""
    writer = ExcelWriter()
    writer.write(rules, file_path, decision_name)
