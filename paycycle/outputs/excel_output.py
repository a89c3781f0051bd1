# paycycle/outputs/excel_output.py

"""Excel output module backed by XlsxWriter.

Writes one user's pay-period report to a workbook with a ``Report``
worksheet (one row per week plus a running-total column chart) and a
``Transactions`` worksheet listing every transaction under its week.
"""

from __future__ import annotations

import os
import xlsxwriter

from paycycle.outputs.base import BaseOutput


class ExcelOutput(BaseOutput):
    """Generate a local Excel workbook for a user's report."""

    REPORT = "Report"
    TRANSACTIONS = "Transactions"
    REPORT_HEADERS = ["week start", "week end", "quantity", "amount", "total amount"]
    TX_HEADERS = ["week start", "date", "description", "amount"]

    def __init__(self, config: dict):
        self.config = config
        self.output_dir = config.get("output_dir", "data")
        os.makedirs(self.output_dir, exist_ok=True)

    def write(self, user_id, buckets):
        out_path = os.path.join(self.output_dir, f"Report-{user_id}.xlsx")
        report_rows, tx_rows = self._build_rows(buckets)

        workbook = xlsxwriter.Workbook(out_path)
        amount_fmt = workbook.add_format({"num_format": "$#,##0.00"})

        report_ws = workbook.add_worksheet(self.REPORT)
        report_ws.freeze_panes(1, 0)
        report_ws.write_row(0, 0, self.REPORT_HEADERS)
        for idx, row in enumerate(report_rows, start=1):
            report_ws.write_row(idx, 0, row[:3])
            report_ws.write_number(idx, 3, row[3], amount_fmt)
            report_ws.write_number(idx, 4, row[4], amount_fmt)
        report_ws.set_column(0, 1, 22)
        report_ws.set_column(3, 4, 14, amount_fmt)

        tx_ws = workbook.add_worksheet(self.TRANSACTIONS)
        tx_ws.freeze_panes(1, 0)
        tx_ws.write_row(0, 0, self.TX_HEADERS)
        for idx, row in enumerate(tx_rows, start=1):
            tx_ws.write_row(idx, 0, row[:3])
            tx_ws.write_number(idx, 3, row[3], amount_fmt)
        tx_ws.set_column(0, 1, 22)
        tx_ws.set_column(3, 3, 14, amount_fmt)

        if report_rows:
            self._insert_chart(workbook, report_ws, len(report_rows))

        workbook.close()
        return out_path

    def _build_rows(self, buckets):
        report_rows = []
        tx_rows = []
        for bucket in buckets:
            week_start = f"{bucket.start.isoformat()} {bucket.weekday_start}"
            week_end = f"{bucket.end.isoformat()} {bucket.weekday_end}"
            report_rows.append([
                week_start,
                week_end,
                len(bucket.transactions),
                float(bucket.amount),
                float(bucket.total_amount),
            ])
            for tx in bucket.transactions:
                tx_rows.append([
                    week_start,
                    tx.date.date().isoformat(),
                    tx.description,
                    float(tx.amount),
                ])
        return report_rows, tx_rows

    def _insert_chart(self, workbook, report_ws, row_count):
        chart = workbook.add_chart({"type": "column"})
        chart.add_series({
            "categories": [report_ws.name, 1, 0, row_count, 0],
            "values": [report_ws.name, 1, 3, row_count, 3],
            "name": "Weekly amount",
        })
        chart.set_title({"name": "Spending by pay-period week"})
        chart.set_legend({"position": "bottom"})
        report_ws.insert_chart(1, 6, chart, {"x_offset": 0, "y_offset": 0})
